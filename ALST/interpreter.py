
from .prelude import *
from .lexer import GrammarError
from .program import (Leaf, stmt_target, stmt_value,
                      signature, kernel_constants, is_imag_literal)

import numpy as np

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def Interpret(prog, *arrays):
  """ Evaluate `prog` directly on the given arrays, in signature order
      (`ri, ii, ro, io` or `xi, xo`).  Outputs are written in place. """
  _Interpreter(prog, arrays)

def _const_val(lit):
  if is_imag_literal(lit):
    return complex(0, float(lit[:-1]))
  return float(lit)

class _Interpreter:
  def __init__(self, prog, arrays):
    sig           = signature(prog)
    if len(arrays) != len(sig.args):
      raise TypeError(f"expected {len(sig.args)} arrays "
                      f"({', '.join(sig.args)}), got {len(arrays)}")
    self._env     = {}

    # bind all inputs
    for nm,arr in zip(sig.args, arrays):
      self._env[nm] = arr
    for c in kernel_constants(prog):
      self._env[c.name] = _const_val(c.value)

    for s in prog.stmts:
      self._exec(s)

  def _lookup(self, e, nm):
    if nm not in self._env:
      raise GrammarError(e.srcinfo, f"'{nm}' is used before it is defined")
    return self._env[nm]

  def _exec(self, stmt):
    lhs   = stmt_target(stmt)
    val   = self._eval(stmt_value(stmt))
    if lhs.index is None:
      self._env[lhs.name] = val
    else:
      self._lookup(lhs, lhs.name)[lhs.index] = val

  def _eval(self, e):
    if type(e) is Leaf:
      val = self._lookup(e, e.name)
      if e.index is not None:
        val = val[e.index]
      return val

    args  = [ self._eval(a) for a in e.args ]
    if e.is_unary():
      return -args[0] if e.op == "-" else +args[0]
    elif e.op == "*":
      return args[0] * args[1]

    # n-ary sums fold left to right, as written
    acc   = args[0]
    for a in args[1:]:
      acc = acc + a if e.op == "+" else acc - a
    return acc

def run_kernel(prog, x):
  """ Convenience wrapper: transform the complex vector `x` with `prog`
      and return the complex result """
  x     = np.asarray(x, dtype=np.complex128)
  sig   = signature(prog)
  if sig.split:
    ri, ii  = x.real.copy(), x.imag.copy()
    ro, io  = np.zeros_like(ri), np.zeros_like(ii)
    Interpret(prog, ri, ii, ro, io)
    return ro + 1j*io
  else:
    xo      = np.zeros_like(x)
    Interpret(prog, x, xo)
    return xo
