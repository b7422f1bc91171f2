
from .prelude import *
from .emit import KernelWriter, FormatError
from .program import is_imag_literal

import ast
import logging

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def py_literal(lit):
  return lit[:-1] + "j" if is_imag_literal(lit) else lit

class PyKernel(KernelWriter):
  indent_unit = "    "

  def gen_kernel(self):
    self.line(f"N = {self._size}")
    self.line()
    self.line()
    self.line(f"def {self._name}({', '.join(self._sig.args)}):")
    self.push_scope()
    self.gen_body()
    self.pop_scope()

  def gen_consts(self, consts):
    for c in consts:
      self.line(f"{c.name} = {py_literal(c.value)}")

  # Python has no separate declaration form
  def decl_stmt(self, lhs, rhs):
    return f"{lhs} = {rhs}"

  def assign_stmt(self, lhs, rhs):
    return f"{lhs} = {rhs}"

  def check(self, src):
    try:
      ast.parse(src, filename=f"<{self._name}>")
    except SyntaxError as err:
      raise FormatError(None, f"generated Python does not parse: "
                              f"{err.msg} at line {err.lineno}\n"
                              f"    {err.text}") from err

def emit_python(prog, name, check=True):
  """ Render `prog` as a Python module defining the kernel `name` """
  K = PyKernel(prog, name)
  return K.checked_source() if check else K.source()

def compile_kernel(prog, name="kernel"):
  """ Emit `prog` as Python and return the resulting function.

  The kernel writes its outputs in place: call it as
  `f(ri, ii, ro, io)` or `f(xi, xo)` with indexable arrays.
  """
  src       = emit_python(prog, name)
  locmap    = {}
  exec(compile(src, f"<alst:{name}>", "exec"), locmap)
  fn        = locmap[name]
  fn.size   = locmap["N"]
  log.debug(f"compiled kernel {name} (N={fn.size})")
  return fn
