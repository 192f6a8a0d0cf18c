"""Order report and receipt PDF exports."""
