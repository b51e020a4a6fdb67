"""WorkNexus: gig marketplace API connecting student workers with event organizers."""

__version__ = "1.0.0"
