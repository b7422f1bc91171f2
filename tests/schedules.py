""" Direct (all-pairs) DFT schedules in the text format that genfft prints
with -dump-asched, plus the matching constant table in its C output.

These stand in for real generator output in the tests: they use the
same statement shapes (temporaries, indexed inputs and outputs, n-ary
sums with unary minus operands, products with named constants) and the
same `DK(KPxxxxxxxxx, +0.xxx);` constant declarations.
"""

import math

import numpy as np

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def exact_twiddle(m, N):
  """ (cos, sin) of 2*pi*m/N, exact at multiples of a quarter turn """
  m = m % N
  if (4*m) % N == 0:
    return [ (1,0), (0,1), (-1,0), (0,-1) ][(4*m) // N]
  a = 2*math.pi*m/N
  return math.cos(a), math.sin(a)

def _sign(v):
  return 1 if v > 0 else -1

class _ScheduleBuilder:
  def __init__(self):
    self.lines    = []
    self.consts   = {}
    self._ntemp   = 0

  def const(self, v):
    v     = abs(v)
    name  = "KP" + f"{v:.9f}"[2:]
    self.consts[name] = f"{v:+.20f}"
    return name

  def temp(self, expr):
    self._ntemp += 1
    name = f"T{self._ntemp}"
    self.lines.append(f"(:= {name} {expr})")
    return name

  def scaled(self, v, x):
    """ signed term for v*x, or None when v is zero """
    if v == 0:
      return None
    if abs(v) == 1:
      return (_sign(v), x)
    return (_sign(v), self.temp(f"(* {self.const(v)} {x})"))

  def sum(self, terms):
    terms = [ t for t in terms if t is not None ]
    strs  = [ x if s > 0 else f"(- {x})" for s,x in terms ]
    if len(strs) == 1:
      return strs[0]
    return f"(+ {' '.join(strs)})"

  def assign(self, tgt, expr):
    self.lines.append(f"(:= {tgt} {expr})")

  def cout(self):
    return '\n'.join(
      [ "/* Generated by: genfft (test stand-in) */", "",
        "#include \"dft/codelet-dft.h\"", "" ] +
      [ f"DK({nm}, {v});" for nm,v in sorted(self.consts.items()) ] +
      [ "", "static void n1_x(const R *ri, const R *ii, R *ro, R *io)",
        "{", "}" ]) + "\n"

def split_schedule(N):
  """ (schedule, cout) for a size-N kernel over ri, ii, ro, io """
  B = _ScheduleBuilder()
  for w in range(N):
    re, im  = [], []
    for k in range(N):
      c, s  = exact_twiddle(k*w, N)
      r, i  = f"ri[{k}]", f"ii[{k}]"
      # (r + i*j)(c - s*j) = (r*c + i*s) + (i*c - r*s)*j
      re   += [ B.scaled(c, r), B.scaled(s, i) ]
      im   += [ B.scaled(c, i), B.scaled(-s, r) ]
    B.assign(f"ro[{w}]", B.temp(B.sum(re)))
    B.assign(f"io[{w}]", B.temp(B.sum(im)))
  return '\n'.join(B.lines) + '\n', B.cout()

def complex_schedule(N):
  """ (schedule, cout) for a size-N kernel over xi, xo """
  B = _ScheduleBuilder()
  for w in range(N):
    terms   = []
    for k in range(N):
      c, s  = exact_twiddle(k*w, N)
      x     = f"xi[{k}]"
      if s == 0:
        terms.append((int(c), x))
      elif c == 0:
        # c - s*I with c == 0
        terms.append((-int(s), B.temp(f"(* I {x})")))
      else:
        cs  = B.sum([ (_sign(c), B.const(c)),
                      (-_sign(s), f"(* I {B.const(s)})") ])
        terms.append((1, B.temp(f"(* {x} {cs})")))
    B.assign(f"xo[{w}]", B.sum(terms))
  return '\n'.join(B.lines) + '\n', B.cout()

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Reference transform

def step_input(N):
  x = np.zeros(N, dtype=np.complex128)
  x[:N//2] = 1
  return x

def direct_dft(x):
  N   = len(x)
  out = np.zeros(N, dtype=np.complex128)
  for w in range(N):
    for k in range(N):
      out[w] += x[k] * np.exp(-2j*np.pi*((k*w) % N)/N)
  return out

def dft_error(a, b):
  return np.mean(np.abs(a - b))
