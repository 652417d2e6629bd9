"""nfinstall: pick a Nerd Font from the latest release and download it for installation."""

__version__ = "0.1.0"
