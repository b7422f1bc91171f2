
from .adt import ADT

from .prelude import *
from .lexer import GrammarError, SCHED_OPS

from collections import namedtuple
import re

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Schedule IR

# a trailing 'i' marks an imaginary literal; only the implicit
# imaginary unit uses it
_literal_pattern = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)i?$")
def is_decimal_literal(obj):
  return (type(obj) is str) and (_literal_pattern.match(obj) != None)

def is_imag_literal(lit):
  return lit.endswith("i")

SCHED = ADT("""
module Schedule {
  program = ( const*  consts,
              expr*   stmts )

  const   = ( name name, literal value, srcinfo srcinfo )

  expr    = Leaf  ( name name, int? index )
          | Op    ( op op, expr* args )
          attributes( srcinfo srcinfo )
}
""", {
  'name':     is_valid_name,
  'op':       lambda x: x in SCHED_OPS,
  'literal':  is_decimal_literal,
  'srcinfo':  lambda x: type(x) is SrcInfo,
})

Leaf    = SCHED.Leaf
Op      = SCHED.Op
Const   = SCHED.const
Program = SCHED.program

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# helpers on expressions

@extclass(SCHED.expr)
def is_unary(e):
  return type(e) is Op and len(e.args) == 1

@extclass(SCHED.expr)
def leaves(e):
  if type(e) is Leaf:
    yield e
  else:
    for a in e.args:
      yield from a.leaves()

@extclass(SCHED.Leaf)
def __str__(e):
  return e.name if e.index is None else f"{e.name}[{e.index}]"

@extclass(SCHED.Op)
def __str__(e):
  return f"({e.op} {' '.join([ str(a) for a in e.args ])})"

def stmt_target(stmt):
  return stmt.args[0]

def stmt_value(stmt):
  return stmt.args[1]

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Signature & size inference

# name of the real-part input array of split (real/imaginary) kernels
SPLIT_REAL_INPUT  = "ri"

# the imaginary unit; complex kernels multiply by it, so it must be a
# named constant rather than a language literal
IMAG_UNIT         = "I"

Signature = namedtuple('Signature',['split','args','inputs','outputs'])

SPLIT_SIG   = Signature(True,  ("ri","ii","ro","io"), ("ri","ii"), ("ro","io"))
CMPLX_SIG   = Signature(False, ("xi","xo"),            ("xi",),     ("xo",))

def indexed_leaves(prog):
  """ Every array element reference in the program, targets included """
  for s in prog.stmts:
    for l in s.leaves():
      if l.index is not None:
        yield l

def input_names(prog):
  return { l.name for l in indexed_leaves(prog) }

def is_split(prog):
  """ A kernel is split (four real arrays) exactly when the real-part
      input array is referenced anywhere in the program """
  return SPLIT_REAL_INPUT in input_names(prog)

def signature(prog):
  return SPLIT_SIG if is_split(prog) else CMPLX_SIG

def kernel_size(prog):
  """ N is one past the largest array index referenced """
  idx = [ l.index for l in indexed_leaves(prog) ]
  if len(idx) == 0:
    srcinfo = (prog.stmts[0].srcinfo if len(prog.stmts) > 0
               else None)
    raise GrammarError(srcinfo, "schedule references no array element; "
                                "cannot infer the kernel size")
  return max(idx) + 1

def kernel_constants(prog):
  """ Constants to declare in the kernel, in declaration order """
  consts = list(prog.consts)
  if not is_split(prog):
    consts.insert(0, Const(IMAG_UNIT, "1i", null_srcinfo()))
  return consts
