
from .prelude import ALSTError, is_valid_name
from .logger import init_logger
from .driver import (TARGETS, load_config, generate, read_text,
                     write_atomic, run_batch)

import argparse
import logging
import os
import sys

# __name__ is "__main__" under `python -m ALST`
log = logging.getLogger("ALST.main")

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def build_argparser():
  parser = argparse.ArgumentParser(
    prog="alst",
    description="Translate genfft schedules (-dump-asched) into "
                "fixed-size DFT kernels.")
  parser.add_argument("schedule", nargs="?",
                      help="schedule file (.alst) for a single kernel")
  parser.add_argument("-c", "--config",
                      help="JSON list of {prefix, func} jobs to run as a batch")
  parser.add_argument("-t", "--target", choices=sorted(TARGETS),
                      default="go", help="output language (default: go)")
  parser.add_argument("-n", "--name", default="DFT",
                      help="name of the generated function (default: DFT)")
  parser.add_argument("-p", "--package", default="dft",
                      help="Go package name (default: dft)")
  parser.add_argument("-k", "--constants",
                      help="generator C output holding the constant table; "
                           "defaults to the schedule's .cout sibling")
  parser.add_argument("-o", "--output",
                      help="output file for a single kernel (default: stdout)")
  parser.add_argument("--no-check", action="store_true",
                      help="skip the target syntax check")
  parser.add_argument("-v", "--verbose", action="store_true",
                      help="debug logging")
  return parser

def _single(args):
  sched_file  = args.schedule
  const_file  = args.constants
  if const_file is None:
    sibling   = os.path.splitext(sched_file)[0] + ".cout"
    const_file = sibling if os.path.exists(sibling) else None

  src = generate(read_text(sched_file),
                 read_text(const_file) if const_file else None,
                 args.name, args.target,
                 schedule_file=sched_file,
                 constants_file=const_file or "<constants>",
                 package=args.package, check=not args.no_check)
  if args.output is None:
    sys.stdout.write(src)
  else:
    log.info(f"writing {args.output}")
    write_atomic(args.output, src)

def main(argv=None):
  parser  = build_argparser()
  args    = parser.parse_args(argv)
  if (args.schedule is None) == (args.config is None):
    parser.error("give exactly one of SCHEDULE or --config")
  if not is_valid_name(args.name):
    parser.error(f"'{args.name}' is not a valid function name")
  if not is_valid_name(args.package):
    parser.error(f"'{args.package}' is not a valid package name")

  init_logger("DEBUG" if args.verbose else "INFO", verbose=args.verbose)

  try:
    if args.config is not None:
      failures = run_batch(load_config(args.config), args.target,
                           package=args.package, check=not args.no_check)
      return 1 if len(failures) > 0 else 0
    _single(args)
  except (ALSTError, OSError) as err:
    log.error(str(err))
    return 1
  return 0

if __name__ == '__main__':
  sys.exit(main())
