from .loader import load_config, load_program
from .parser import parse_blocks, parse_program

__all__ = ["load_config", "load_program", "parse_blocks", "parse_program"]
