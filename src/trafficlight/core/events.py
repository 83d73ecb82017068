"""Well-known event type constants.

Defined centrally so publishers and subscribers reference the same strings.
"""

# --- Input events (hardware / network → reconciler) ----------------------

BUTTON_PRESSED = "input.button.pressed"
REMOTE_UPDATED = "input.remote.updated"
ALERT_REQUESTED = "input.remote.alert"

# --- Timer events ---------------------------------------------------------

ALERT_TICK = "timer.alert.tick"
