
from .prelude import *
from .program import (Leaf, Op, stmt_target, stmt_value,
                      signature, kernel_size, kernel_constants)

import logging

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Expression rendering, shared by every target
#
# Go and Python agree on the syntax and precedence of everything a
# schedule can contain (`+`, `-`, `*`, unary signs and `a[i]`), so the
# grouping rules live here once:
#
#   - the statement value is rendered bare; every n-ary op below it is
#     wrapped in parentheses
#   - unary ops render as the sign followed by their operand
#   - in an n-ary `+`, a unary `-` operand folds into `a-b`
#   - the right operand of `*` is always grouped when it is n-ary
#   - operands are never reordered
#   - a sign never directly follows the same sign (no `--` or `++`)

class FormatError(ALSTError):
  """ Emitted text is not valid source in the target language """
  pass

def _is_nary(e):
  return type(e) is Op and len(e.args) > 1

def _after(sym, e, depth):
  """ render `e` as the operand written right after the sign `sym` """
  s = render_expr(e, depth)
  if e.is_unary() and e.op == sym:
    s = f"({s})"
  return s

def render_expr(e, depth=1, group=False):
  """ Render an expression at the given nesting depth.  Depth 1 is the
      value of a statement; deeper n-ary ops are parenthesized. """
  if type(e) is Leaf:
    return str(e)

  if e.is_unary():
    return f"{e.op}{_after(e.op, e.args[0], depth+1)}"

  parts = [ render_expr(e.args[0], depth+1) ]
  for a in e.args[1:]:
    if e.op == "+" and a.is_unary() and a.op == "-":
      parts.append("-" + _after("-", a.args[0], depth+1))
    elif e.op == "*" and _is_nary(a):
      parts.append("*" + render_expr(a, depth+1, group=True))
    else:
      parts.append(e.op + _after(e.op, a, depth+1))

  s = ''.join(parts)
  return f"({s})" if (depth > 1 or group) else s

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Kernel writer

class KernelWriter:
  """ Accumulates the lines of one generated kernel.

  Subclasses provide the target syntax: the file header, the function
  signature, the constant block, the two kinds of statement, and the
  syntax check applied to the finished text.
  """

  indent_unit = "    "

  def __init__(self, prog, name):
    if not is_valid_name(name):
      raise TypeError(f"expected a valid function name, got '{name}'")
    self._prog    = prog
    self._name    = name
    self._sig     = signature(prog)
    self._size    = kernel_size(prog)
    self._consts  = kernel_constants(prog)
    self._tab     = ""
    self._lines   = []

    log.debug(f"{name}: N={self._size}, "
              f"{'split' if self._sig.split else 'complex'} signature, "
              f"{len(self._consts)} constants")
    self.gen_kernel()

  def line(self, s=""):
    self._lines.append(f"{self._tab}{s}" if s != "" else "")

  def push_scope(self):
    self._tab  += self.indent_unit

  def pop_scope(self):
    self._tab   = self._tab[0:-len(self.indent_unit)]

  def gen_body(self):
    if len(self._consts) > 0:
      self.gen_consts(self._consts)
      self.line()
    for s in self._prog.stmts:
      self.gen_stmt(s)

  def gen_stmt(self, stmt):
    lhs = stmt_target(stmt)
    rhs = render_expr(stmt_value(stmt))
    # temporaries are assigned exactly once, so their only assignment
    # is also their declaration
    if lhs.index is None and is_temp_name(lhs.name):
      self.line(self.decl_stmt(str(lhs), rhs))
    else:
      self.line(self.assign_stmt(str(lhs), rhs))

  def source(self):
    return '\n'.join(self._lines) + '\n'

  def checked_source(self):
    src = self.source()
    self.check(src)
    return src

  # target hooks
  def gen_kernel(self):
    raise NotImplementedError()

  def gen_consts(self, consts):
    raise NotImplementedError()

  def decl_stmt(self, lhs, rhs):
    raise NotImplementedError()

  def assign_stmt(self, lhs, rhs):
    raise NotImplementedError()

  def check(self, src):
    raise NotImplementedError()
