
from .prelude import *
from .emit import KernelWriter, FormatError

import logging
import shutil
import subprocess

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

GO_ELEM_TYPES = {
  True:   "float64",      # split real/imaginary arrays
  False:  "complex128",
}

def gofmt_check(src):
  """ Run the Go syntax checker over `src`.  Without a Go toolchain on
      PATH the check is skipped. """
  gofmt = shutil.which("gofmt")
  if gofmt is None:
    log.debug("gofmt not found on PATH; skipping Go syntax check")
    return
  try:
    subprocess.run([gofmt, "-e"], input=src, check=True,
                   capture_output=True, text=True)
  except subprocess.CalledProcessError as err:
    raise FormatError(None, f"gofmt rejected generated source:\n"
                            f"{err.stderr}") from err

class GoKernel(KernelWriter):
  indent_unit = "\t"

  def __init__(self, prog, name, package="dft"):
    if not is_valid_name(package):
      raise TypeError(f"expected a valid package name, got '{package}'")
    self._package = package
    super().__init__(prog, name)

  def size_name(self):
    return f"{self._name}Size"

  def gen_kernel(self):
    args  = ', '.join(self._sig.args)
    typ   = GO_ELEM_TYPES[self._sig.split]

    self.line(f"package {self._package}")
    self.line()
    self.line(f"const {self.size_name()} = {self._size}")
    self.line()
    self.line(f"func {self._name}({args} []{typ}) {{")
    self.push_scope()
    self.gen_body()
    self.pop_scope()
    self.line("}")

  def gen_consts(self, consts):
    # pad names the way gofmt aligns a const block
    width = max( len(c.name) for c in consts )
    self.line("const (")
    self.push_scope()
    for c in consts:
      self.line(f"{c.name.ljust(width)} = {c.value}")
    self.pop_scope()
    self.line(")")

  def decl_stmt(self, lhs, rhs):
    return f"{lhs} := {rhs}"

  def assign_stmt(self, lhs, rhs):
    return f"{lhs} = {rhs}"

  def check(self, src):
    gofmt_check(src)

def emit_go(prog, name, package="dft", check=True):
  """ Render `prog` as a Go source file defining the kernel `name` """
  K = GoKernel(prog, name, package)
  return K.checked_source() if check else K.source()
