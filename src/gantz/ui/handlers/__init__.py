"""Page actions: each one validates, calls the services, and raises GantzError on failure."""
