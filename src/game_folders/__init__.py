"""game-folders: browse and open Steam game and Wine prefix folders."""

__version__ = "0.1.0"
