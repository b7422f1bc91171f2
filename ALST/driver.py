
from .prelude import *
from .parser import parse_schedule
from .consts import extract_constants, dedup
from .program import Program
from .go_backend import emit_go
from .py_backend import emit_python

from collections import namedtuple
import json
import logging
import os
import tempfile

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Jobs and configuration
#
# A batch config is a JSON list of objects naming the file prefix of one
# kernel size and the function to generate for it:
#
#   [ { "prefix": "dft/float_4", "func": "DftFloat4" }, ... ]
#
# For each job, `<prefix>.alst` holds the schedule and `<prefix>.cout`
# (optional) the generator's C output with the constant table.

SCHEDULE_EXT  = ".alst"
CONSTANTS_EXT = ".cout"

TARGETS = {
  "go":       ".go",
  "python":   ".py",
}

Job = namedtuple('Job',['prefix','func'])

class ConfigError(ALSTError):
  """ The batch configuration is malformed """
  pass

class InputError(ALSTError):
  """ An input file cannot be decoded as text """
  pass

def load_config(path):
  """ Read a JSON job list from `path` """
  try:
    entries = json.loads(read_text(path))
  except json.JSONDecodeError as err:
    raise ConfigError(SrcInfo(path, err.lineno, err.colno),
                      f"invalid JSON: {err.msg}") from err

  if type(entries) is not list:
    raise ConfigError(SrcInfo(path, 1), "expected a list of jobs")
  jobs = []
  for i,e in enumerate(entries):
    if (type(e) is not dict or
        type(e.get("prefix")) is not str or
        type(e.get("func")) is not str):
      raise ConfigError(SrcInfo(path, 1), f"job {i}: expected an object "
                                          f"with string 'prefix' and 'func'")
    if not is_valid_name(e["func"]):
      raise ConfigError(SrcInfo(path, 1), f"job {i}: '{e['func']}' is not "
                                          f"a valid function name")
    jobs.append(Job(e["prefix"], e["func"]))
  return jobs

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Generation

def generate(schedule_text, constants_text, name, target="go",
             schedule_file="<schedule>", constants_file="<constants>",
             package="dft", check=True):
  """ Translate one schedule (and its optional constant table) into the
      source text of one kernel.  Pure function of its inputs. """
  if target not in TARGETS:
    raise ValueError(f"unknown target '{target}'; "
                     f"expected one of {', '.join(TARGETS)}")
  prog    = parse_schedule(schedule_text, schedule_file)
  if constants_text is not None:
    extra = extract_constants(constants_text, constants_file)
    prog  = Program(dedup(prog.consts + extra), prog.stmts)

  if target == "go":
    return emit_go(prog, name, package=package, check=check)
  else:
    return emit_python(prog, name, check=check)

def read_text(path):
  with open(path, "rb") as F:
    data = F.read()
  try:
    return data.decode("utf-8")
  except UnicodeDecodeError as err:
    lineno = data.count(b"\n", 0, err.start) + 1
    raise InputError(SrcInfo(path, lineno),
                     f"not valid UTF-8 text: byte 0x{data[err.start]:02x} "
                     f"at offset {err.start}") from err

def _umask():
  # the umask can only be read by setting it
  mask = os.umask(0)
  os.umask(mask)
  return mask

def write_atomic(path, text):
  """ Write `text` to `path` so that readers never observe a partial
      file: the data goes to a sibling temporary that is renamed over
      `path` once complete.  The result gets the permissions a plain
      `open(path, "w")` would give it. """
  dirname   = os.path.dirname(os.path.abspath(path))
  fd, tmp   = tempfile.mkstemp(dir=dirname, prefix=".alst-", suffix=".tmp")
  try:
    with os.fdopen(fd, "w", encoding="utf-8") as F:
      F.write(text)
    os.chmod(tmp, 0o666 & ~_umask())
    os.replace(tmp, path)
  except BaseException:
    os.unlink(tmp)
    raise

def output_path(job, target="go"):
  return job.prefix + TARGETS[target]

def run_job(job, target="go", package="dft", check=True):
  """ Generate and write the kernel for one job; returns the output path """
  sched_file  = job.prefix + SCHEDULE_EXT
  const_file  = job.prefix + CONSTANTS_EXT
  sched_text  = read_text(sched_file)
  const_text  = read_text(const_file) if os.path.exists(const_file) else None

  src         = generate(sched_text, const_text, job.func, target,
                         schedule_file=sched_file, constants_file=const_file,
                         package=package, check=check)
  out         = output_path(job, target)
  log.info(f"writing {out}")
  write_atomic(out, src)
  return out

def run_batch(jobs, target="go", package="dft", check=True):
  """ Run every job.  A failed job is logged and skipped; the list of
      `(job, error)` failures is returned. """
  failures = []
  for job in jobs:
    try:
      run_job(job, target, package=package, check=check)
    except (ALSTError, OSError) as err:
      log.error(f"{job.prefix}: {err}")
      failures.append((job, err))
  if len(failures) > 0:
    log.error(f"{len(failures)} of {len(jobs)} kernels failed")
  return failures
