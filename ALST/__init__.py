""" ALST - Annotated List Schedule Translator

Turns the straight-line schedules printed by FFTW's `genfft`
(`-dump-asched`) into fixed-size DFT kernels in Go or Python.
"""

from .prelude import ALSTError, SrcInfo

from .lexer import tokenize, GrammarError

from .program import (
  SCHED,
  Leaf,
  Op,
  Const,
  Program,
  signature,
  is_split,
  kernel_size,
  kernel_constants,
)

from .parser import parse_line, parse_schedule

from .consts import extract_constants, ConstantFormatError

from .emit import render_expr, FormatError

from .go_backend import emit_go

from .py_backend import emit_python, compile_kernel

from .interpreter import Interpret, run_kernel

from .driver import (Job, ConfigError, InputError,
                     load_config, generate, run_job, run_batch)

__all__ = [
  "ALSTError",
  "SrcInfo",
  #
  "tokenize",
  "GrammarError",
  #
  "SCHED",
  "Leaf",
  "Op",
  "Const",
  "Program",
  "signature",
  "is_split",
  "kernel_size",
  "kernel_constants",
  #
  "parse_line",
  "parse_schedule",
  #
  "extract_constants",
  "ConstantFormatError",
  #
  "render_expr",
  "FormatError",
  "emit_go",
  "emit_python",
  "compile_kernel",
  #
  "Interpret",
  "run_kernel",
  #
  "Job",
  "ConfigError",
  "InputError",
  "load_config",
  "generate",
  "run_job",
  "run_batch",
]
