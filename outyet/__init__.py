"""outyet: poll a change URL until a version tag exists and report it over HTTP."""

__version__ = "0.1.0"
