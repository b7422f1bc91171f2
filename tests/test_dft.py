
import unittest
from ALST import *
from .schedules import (split_schedule, complex_schedule,
                        step_input, direct_dft, dft_error)

import numpy as np
import os
import shutil
import subprocess
import tempfile

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

TOLERANCE = 2.5e-15
SIZES     = range(2, 17)

def load(sched):
  text, cout = sched
  prog  = parse_schedule(text, "dft.alst")
  return Program(prog.consts + extract_constants(cout, "dft.cout"),
                 prog.stmts)

def run_compiled(prog, x):
  f = compile_kernel(prog, "dft")
  if is_split(prog):
    ro, io = np.zeros(len(x)), np.zeros(len(x))
    f(x.real.copy(), x.imag.copy(), ro, io)
    return ro + 1j*io
  else:
    xo = np.zeros_like(x)
    f(x, xo)
    return xo

class TestInference(unittest.TestCase):

  def test_split_signature(self):
    prog = load(split_schedule(4))
    self.assertTrue(is_split(prog))
    self.assertEqual(signature(prog).args, ("ri","ii","ro","io"))
    self.assertNotIn("I", [ c.name for c in kernel_constants(prog) ])

  def test_complex_signature(self):
    prog = load(complex_schedule(4))
    self.assertFalse(is_split(prog))
    self.assertEqual(signature(prog).args, ("xi","xo"))
    consts = kernel_constants(prog)
    self.assertEqual((consts[0].name, consts[0].value), ("I", "1i"))
    self.assertEqual(consts[1:], prog.consts)

  def test_signature_looks_past_first_statement(self):
    prog = parse_schedule("(:= T1 KP5)\n(:= ro[0] (+ T1 ri[1]))\n")
    self.assertTrue(is_split(prog))

  def test_kernel_size(self):
    for N in SIZES:
      self.assertEqual(kernel_size(load(split_schedule(N))), N)
      self.assertEqual(kernel_size(load(complex_schedule(N))), N)
    prog = parse_schedule("(:= T1 (+ xi[3] xi[11]))\n(:= xo[0] T1)\n")
    self.assertEqual(kernel_size(prog), 12)


class TestNumeric(unittest.TestCase):

  def check_sizes(self, gen, run):
    for N in SIZES:
      with self.subTest(N=N):
        x     = step_input(N)
        out   = run(load(gen(N)), x)
        err   = dft_error(out, direct_dft(x))
        self.assertLessEqual(err, TOLERANCE)

  def test_split_compiled(self):
    self.check_sizes(split_schedule, run_compiled)

  def test_complex_compiled(self):
    self.check_sizes(complex_schedule, run_compiled)

  def test_split_interpreted(self):
    self.check_sizes(split_schedule, run_kernel)

  def test_complex_interpreted(self):
    self.check_sizes(complex_schedule, run_kernel)

  def test_rendering_preserves_value(self):
    # evaluating the tree and evaluating its rendering give the same
    # bits, since the rendering neither regroups nor reorders
    rng = np.random.default_rng(7)
    for gen in [ split_schedule, complex_schedule ]:
      for N in [ 3, 8, 13 ]:
        x = rng.standard_normal(N) + 1j*rng.standard_normal(N)
        prog = load(gen(N))
        np.testing.assert_array_equal(run_compiled(prog, x),
                                      run_kernel(prog, x))

  def test_rendering_preserves_value_of_odd_shapes(self):
    src = ( "(:= T1 (- (* KP5 (+ ri[0] (- ri[1]))) (- ii[0]) ii[1]))\n"
            "(:= T2 (+ (- T1) (- (- ri[1])) (* ii[1] (- ri[0] ii[0]))))\n"
            "(:= ro[0] (- T1 (- T2)))\n"
            "(:= io[0] (* (+ T1 T2) (- KP5)))\n"
            "(:= ro[1] (+ (+ T1) (- (+ T2 ri[0]))))\n"
            "(:= io[1] (- (- (- T2))))\n"
            "DK(KP5, +0.3);\n" )
    prog = parse_schedule(src)
    x    = np.array([0.1+0.7j, -1.3+0.2j])
    np.testing.assert_array_equal(run_compiled(prog, x), run_kernel(prog, x))


GO_TEST = """\
package dft

import (
	"math"
	"math/cmplx"
	"testing"
)

type kernel struct {
	n     int
	split func(ri, ii, ro, io []float64)
	cmplx func(xi, xo []complex128)
}

var kernels = []kernel{
%s}

func stepInput(n int) []complex128 {
	x := make([]complex128, n)
	for k := 0; k < n/2; k++ {
		x[k] = 1
	}
	return x
}

func directDFT(x []complex128) []complex128 {
	n := len(x)
	out := make([]complex128, n)
	for w := 0; w < n; w++ {
		for k := 0; k < n; k++ {
			a := -2 * math.Pi * float64((k*w)%%n) / float64(n)
			out[w] += x[k] * cmplx.Exp(complex(0, a))
		}
	}
	return out
}

func TestKernels(t *testing.T) {
	for _, k := range kernels {
		x := stepInput(k.n)
		got := make([]complex128, k.n)
		if k.split != nil {
			ri, ii := make([]float64, k.n), make([]float64, k.n)
			ro, io := make([]float64, k.n), make([]float64, k.n)
			for i, v := range x {
				ri[i], ii[i] = real(v), imag(v)
			}
			k.split(ri, ii, ro, io)
			for i := range got {
				got[i] = complex(ro[i], io[i])
			}
		} else {
			k.cmplx(x, got)
		}
		want := directDFT(x)
		e := 0.0
		for i := range got {
			e += cmplx.Abs(got[i] - want[i])
		}
		e /= float64(k.n)
		if e > %g {
			t.Errorf("size %%d (split=%%v): mean error %%g", k.n, k.split != nil, e)
		}
	}
}
"""

@unittest.skipUnless(shutil.which("go"), "needs go")
class TestGoKernels(unittest.TestCase):

  def test_step_input(self):
    with tempfile.TemporaryDirectory() as d:
      with open(os.path.join(d, "go.mod"), "w") as F:
        F.write("module dftcheck\n\ngo 1.18\n")
      entries = []
      for N in SIZES:
        for gen, name, entry in [
            (split_schedule,   f"DftFloat{N}", f"\t{{{N}, DftFloat{N}, nil}},\n"),
            (complex_schedule, f"DftCmplx{N}", f"\t{{{N}, nil, DftCmplx{N}}},\n") ]:
          text, cout = gen(N)
          with open(os.path.join(d, f"{name.lower()}.go"), "w") as F:
            F.write(generate(text, cout, name, "go"))
          entries.append(entry)
      with open(os.path.join(d, "dft_test.go"), "w") as F:
        F.write(GO_TEST % (''.join(entries), TOLERANCE))

      env = dict(os.environ, GOCACHE=os.path.join(d, ".cache"),
                 GOPATH=os.path.join(d, ".gopath"),
                 GOTOOLCHAIN="local")
      res = subprocess.run([shutil.which("go"), "test", "./..."], cwd=d,
                           env=env, capture_output=True, text=True)
      self.assertEqual(res.returncode, 0, res.stdout + res.stderr)


class TestIdempotence(unittest.TestCase):

  def test_same_input_same_output(self):
    for gen in [ split_schedule, complex_schedule ]:
      text, cout = gen(6)
      for target in [ "go", "python" ]:
        a = generate(text, cout, "Dft6", target, check=False)
        b = generate(text, cout, "Dft6", target, check=False)
        self.assertEqual(a, b)


# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

if __name__ == '__main__':
  unittest.main()
