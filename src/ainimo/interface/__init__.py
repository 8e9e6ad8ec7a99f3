"""Terminal interface: rich panels and the ``ainimo`` command."""
