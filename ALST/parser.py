
from .prelude import *
from .lexer import (tokenize, GrammarError,
                    LPAREN, RPAREN, IDENT, OP, EOL)
from .program import Leaf, Op, Program
from . import consts as CONSTS

import logging
import re

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

_leaf_pattern = re.compile(r"^([^\[\]]*)(?:\[([^\[\]]*)\])?$")

def parse_leaf(text, srcinfo):
  """ Split a literal such as `xi[3]` into its name and index """
  m = _leaf_pattern.match(text)
  if m is None:
    raise GrammarError(srcinfo, f"malformed identifier '{text}'")
  name, idx = m[1], m[2]
  if not is_valid_name(name):
    raise GrammarError(srcinfo, f"malformed identifier '{text}'")
  if idx is None:
    return Leaf(name, None, srcinfo)
  if not (idx.isascii() and idx.isdigit()):
    raise GrammarError(srcinfo, f"index of '{text}' is not an "
                                f"unsigned integer")
  return Leaf(name, int(idx), srcinfo)

class _Parser:
  """ Recursive descent over the tokens of one schedule line.

  Every `parse_group` call builds its own operand list and hands back
  the position just past its closing parenthesis; the caller resumes
  from there.
  """

  def __init__(self, toks, srcinfo):
    self._toks    = toks
    self._srcinfo = srcinfo

  def _err(self, tok, msg):
    raise GrammarError(self._srcinfo.at_col(tok.col), msg)

  def parse_stmt(self):
    toks  = self._toks
    if toks[0].kind != LPAREN:
      self._err(toks[0], "expected '(' at start of statement")
    stmt, pos = self.parse_group(1, depth=0)
    if toks[pos].kind == RPAREN:
      self._err(toks[pos], "unbalanced parentheses: unexpected ')'")
    elif toks[pos].kind != EOL:
      self._err(toks[pos], "unexpected text after end of statement")

    if stmt.op != ":=":
      self._err(toks[1], f"expected an assignment ':=', "
                         f"not '{stmt.op}'")
    tgt = stmt.args[0]
    if type(tgt) is not Leaf:
      self._err(toks[1], "assignment target must be an identifier")
    if tgt.index is None and not is_temp_name(tgt.name):
      self._err(toks[1], f"assignment target '{tgt.name}' is neither "
                         f"a temporary nor an array element")
    return stmt

  def parse_group(self, pos, depth):
    toks    = self._toks
    optok   = toks[pos]
    if optok.kind != OP:
      self._err(optok, "expected an operator after '('")
    if optok.text == ":=" and depth > 0:
      self._err(optok, "':=' is only allowed at statement level")

    args    = []
    pos    += 1
    while toks[pos].kind != RPAREN:
      tok   = toks[pos]
      if tok.kind == LPAREN:
        sub, pos = self.parse_group(pos+1, depth+1)
        args.append(sub)
      elif tok.kind == IDENT:
        args.append(parse_leaf(tok.text, self._srcinfo.at_col(tok.col)))
        pos += 1
      elif tok.kind == OP:
        self._err(tok, f"operator '{tok.text}' must follow '('")
      else:
        self._err(tok, "unbalanced parentheses: missing ')'")

    self.check_arity(optok, args)
    return Op(optok.text, args, self._srcinfo.at_col(optok.col)), pos+1

  def check_arity(self, optok, args):
    n   = len(args)
    op  = optok.text
    if n == 0:
      self._err(optok, f"'{op}' has no operands")
    elif op == ":=" and n != 2:
      self._err(optok, f"':=' expects a target and one value, "
                       f"got {n} operands")
    elif op == "*" and n != 2:
      self._err(optok, f"'*' expects two operands, got {n}")

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def parse_line(line, srcinfo=None):
  """ Parse one schedule line into a `:=` statement tree """
  srcinfo = srcinfo or SrcInfo("<string>", 1, line=line)
  toks    = tokenize(line, srcinfo)
  return _Parser(toks, srcinfo).parse_stmt()

def parse_schedule(text, filename="<string>"):
  """ Parse the text of a whole schedule file into a Program.

  Blank lines are skipped.  Constant declaration lines are accepted in
  the schedule too, since some build flows append the constant table
  to the schedule itself.
  """
  consts  = []
  stmts   = []
  for lineno, line in enumerate(text.splitlines(), start=1):
    stripped = line.strip()
    if stripped == "":
      continue
    srcinfo  = SrcInfo(filename, lineno, line=stripped)
    c        = CONSTS.match_constant(line, srcinfo)
    if c is not None:
      consts.append(c)
    else:
      stmts.append(parse_line(stripped, srcinfo))

  log.debug(f"{filename}: parsed {len(stmts)} statements, "
            f"{len(consts)} constants")
  return Program(CONSTS.dedup(consts), stmts)
