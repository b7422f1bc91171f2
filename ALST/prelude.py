
from re import compile as _re_compile

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# names

_valid_pattern = _re_compile(r"^[a-zA-Z_]\w*$")
def is_valid_name(obj):
  return (type(obj) is str) and (_valid_pattern.match(obj) != None)

# temporaries are single-assignment scalars named T1, T2, ...
_temp_pattern  = _re_compile(r"^T[0-9]+$")
def is_temp_name(obj):
  return (type(obj) is str) and (_temp_pattern.match(obj) != None)

# from a github gist by victorlei
def extclass(cls):
  return lambda f: (setattr(cls,f.__name__,f) or f)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# source locations

class SrcInfo:
  def __init__(self,filename,lineno,col_offset=None,line=None):
    self.filename       = filename
    self.lineno         = lineno
    self.col_offset     = col_offset
    self.line           = line
  def __str__(self):
    colstr = "" if self.col_offset is None else f":{self.col_offset}"
    return f"{self.filename}:{self.lineno}{colstr}"
  def at_col(self,col_offset):
    return SrcInfo(self.filename, self.lineno, col_offset, self.line)

_null_srcinfo_obj = SrcInfo("unknown",0)
def null_srcinfo(): return _null_srcinfo_obj

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# errors

class ALSTError(Exception):
  """ Base class for every error raised while translating a schedule """
  def __init__(self, srcinfo, msg):
    self.srcinfo  = srcinfo
    self.msg      = msg
    errmsg        = msg if srcinfo is None else f"{srcinfo}: {msg}"
    if srcinfo is not None and srcinfo.line is not None:
      errmsg     += f"\n    {srcinfo.line}"
      if srcinfo.col_offset is not None:
        errmsg   += "\n    " + (" " * srcinfo.col_offset) + "^"
    super().__init__(errmsg)
