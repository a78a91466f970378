"""HTTP push-notification dispatcher backed by Firebase Cloud Messaging."""
