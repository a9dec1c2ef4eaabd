"""Player application: viewport, playback state machine and input handling."""
