
from .prelude import *
from .program import Const

import logging
import re

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Constant declarations in the generator's C output, e.g.
#
#   DK(KP866025403, +0.866025403784438646763723170752936183471402627);
#   DVK(KP500000000, +0.500000000000000000000000000000000000000000000);

_decl_pattern   = re.compile(r"^\s*(DV?K)\((.*)\);\s*$")
_value_pattern  = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)$")

class ConstantFormatError(ALSTError):
  """ A constant declaration line carries a malformed name or value """
  pass

def match_constant(line, srcinfo):
  """ Return the Const declared on `line`, or None if the line is not
      a constant declaration """
  m = _decl_pattern.match(line)
  if m is None:
    return None
  tag, body = m[1], m[2]
  parts     = [ p.strip() for p in body.split(",") ]
  if len(parts) != 2:
    raise ConstantFormatError(srcinfo, f"{tag} expects a name and a value")
  name, value = parts
  if not is_valid_name(name):
    raise ConstantFormatError(srcinfo, f"bad constant name '{name}'")
  if _value_pattern.match(value) is None:
    raise ConstantFormatError(srcinfo, f"value '{value}' of constant "
                                       f"'{name}' is not a decimal literal")
  return Const(name, value, srcinfo)

def dedup(consts):
  """ Keep the first declaration of each constant name """
  seen  = {}
  for c in consts:
    if c.name in seen:
      if seen[c.name].value != c.value:
        log.warning(f"{c.srcinfo}: constant '{c.name}' redeclared with "
                    f"a different value; keeping {seen[c.name].value}")
      continue
    seen[c.name] = c
  return list(seen.values())

def extract_constants(text, filename="<string>"):
  """ Scan a companion artifact for constant declarations, in file order.
      Lines that are not declarations are ignored. """
  consts = []
  for lineno, line in enumerate(text.splitlines(), start=1):
    c = match_constant(line, SrcInfo(filename, lineno, line=line.strip()))
    if c is not None:
      consts.append(c)
  log.debug(f"{filename}: found {len(consts)} constants")
  return dedup(consts)
