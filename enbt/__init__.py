"""Build Minecraft servers.dat NBT files from CSV, TOML or JSON server lists."""

__version__ = "1.0.0"
__all__ = ["__version__"]