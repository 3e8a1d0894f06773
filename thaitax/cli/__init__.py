"""Thai Tax command-line interface."""
