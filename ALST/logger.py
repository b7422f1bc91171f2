
import logging
import sys

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #

def init_logger(level="INFO", verbose=False):
  """ Configure the package-wide `ALST` logger once.

  Modules log through `logging.getLogger(__name__)`; this attaches a
  single stderr handler to their common parent.  Calling it again only
  changes the level.
  """
  logger  = logging.getLogger("ALST")
  logger.setLevel(getattr(logging, level))
  if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
    return logger

  default_fmt = "%(levelname)s %(name)s:%(lineno)d  %(message)s"
  verbose_fmt = ("%(levelname)s %(name)s %(filename)s:%(lineno)d "
                 "%(funcName)s(): %(message)s")
  handler     = logging.StreamHandler(sys.stderr)
  handler.setFormatter(logging.Formatter(verbose_fmt if verbose
                                         else default_fmt))
  logger.addHandler(handler)
  # package-wide logger, kept out of the root logger
  logger.propagate = False
  return logger
