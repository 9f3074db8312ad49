"""Run cargo commands through the mold linker."""

__version__ = '0.0.0.dev0'
