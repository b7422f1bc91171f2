
from .prelude import *

from collections import namedtuple

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Tokens of a schedule line

LPAREN    = "LPAREN"
RPAREN    = "RPAREN"
IDENT     = "IDENT"
OP        = "OP"
EOL       = "EOL"

Token     = namedtuple('Token',['kind','text','col'])

SCHED_OPS = {
  ":=":   True,
  "+":    True,
  "-":    True,
  "*":    True,
}

_BLANKS   = " \t\r\n"

class GrammarError(ALSTError):
  """ A schedule line does not match the accepted grammar """
  pass

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def tokenize(line, srcinfo=None):
  """ Scan one schedule line into a flat token list ending in EOL.

  This is a character-class scan, not a general tokenizer.  Parentheses
  and operator symbols are single tokens, blanks separate operands, and
  everything else is gathered into literals, so that `xi[12]` comes out
  as a single IDENT.
  """
  srcinfo = srcinfo or null_srcinfo()
  toks    = []
  lit     = []
  litcol  = 0

  def flush():
    if len(lit) > 0:
      toks.append(Token(IDENT, ''.join(lit), litcol))
      lit.clear()

  i       = 0
  n       = len(line)
  while i < n:
    c     = line[i]
    if c == '(':
      flush()
      toks.append(Token(LPAREN, c, i))
    elif c == ')':
      flush()
      toks.append(Token(RPAREN, c, i))
    elif c == ':':
      flush()
      if i+1 < n and line[i+1] == '=':
        toks.append(Token(OP, ":=", i))
        i += 1
      else:
        raise GrammarError(srcinfo.at_col(i),
                           "expected '=' after ':'")
    elif c == '=':
      raise GrammarError(srcinfo.at_col(i),
                         "unknown operator '='; assignment is ':='")
    elif c in "+-*":
      flush()
      toks.append(Token(OP, c, i))
    elif c in _BLANKS:
      flush()
    else:
      if len(lit) == 0:
        litcol = i
      lit.append(c)
    i += 1

  flush()
  toks.append(Token(EOL, "", n))
  return toks
