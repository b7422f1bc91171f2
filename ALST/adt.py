""" A module for parsing ASDL grammars into Python Class hierarchies

    Every ASDL type becomes a Python class; every constructor of a sum
    type becomes a sub-class of it.  Constructors type-check their
    arguments against the grammar, so a malformed IR node fails at the
    point where it is built rather than deep inside a later pass.
"""

import asdl
from types import ModuleType

def _asdl_parse(str):
  parser = asdl.ASDLParser()
  module = parser.parse(str)
  return module

_builtin_checks = {
  'string'  : lambda x: type(x) is str,
  'int'     : lambda x: type(x) is int,
  'object'  : lambda x: x is not None,
  'float'   : lambda x: type(x) is float,
  'bool'    : lambda x: type(x) is bool,
}

def _build_superclasses(asdl_mod):
  scs = {}
  def create_invalid_init(nm):
    def invalid_init(self, *args, **kwargs):
      raise TypeError(f"{nm} should never be instantiated")
    return invalid_init

  for nm,v in asdl_mod.types.items():
    if isinstance(v,asdl.Sum):
      scs[nm] = type(nm,(),{"__init__" : create_invalid_init(nm)})
    elif isinstance(v,asdl.Product):
      scs[nm] = type(nm,(),{})
  return scs

def _build_checks(scs, ext_checks):
  checks = _builtin_checks.copy()
  def make_check(sc):
    return lambda x: isinstance(x,sc)

  for nm in ext_checks:
    checks[nm] = ext_checks[nm]
  for nm in scs:
    if nm in checks:
      raise TypeError(f"Name conflict for type '{nm}'")
    checks[nm] = make_check(scs[nm])
  return checks

def _check_field(modname, cname, i, f, val, CHK):
  typname = f"{modname}.{f.type}"
  def bad(what):
    return TypeError(f"{cname}: expected arg {i} \"{f.name}\" "
                     f"to be {what}")
  if f.seq:
    if not type(val) is list:
      raise bad("a list")
    for e in val:
      if not CHK[f.type](e):
        raise bad(f"a list of type \"{typname}\"")
  elif f.opt:
    if val is not None and not CHK[f.type](val):
      raise bad(f"type \"{typname}\" or None")
  elif not CHK[f.type](val):
    raise bad(f"type \"{typname}\"")

def _build_classes(asdl_mod, ext_checks):
  SC   = _build_superclasses(asdl_mod)
  CHK  = _build_checks(SC, ext_checks)
  mod  = ModuleType(asdl_mod.name)

  def create_initfn(C_name, fields):
    names = [ f.name for f in fields ]
    def init(self, *args, **kwargs):
      if len(args) > len(names):
        raise TypeError(f"{C_name}: expected at most {len(names)} "
                        f"args, got {len(args)}")
      vals  = dict(zip(names,args))
      for k,v in kwargs.items():
        if k not in names or k in vals:
          raise TypeError(f"{C_name}: unexpected or repeated arg '{k}'")
        vals[k] = v
      for i,f in enumerate(fields):
        if f.name not in vals:
          if not (f.opt or f.seq):
            raise TypeError(f"{C_name}: missing arg \"{f.name}\"")
          vals[f.name] = [] if f.seq else None
        _check_field(asdl_mod.name, C_name, i, f, vals[f.name], CHK)
      for nm in names:
        setattr(self, nm, vals[nm])
    return init

  def create_reprfn(C_name, fields):
    def repr_fn(self):
      prints = ','.join([ f"{f.name}={getattr(self,f.name)!r}"
                          for f in fields if f.type != 'srcinfo' ])
      return f"{C_name}({prints})"
    return repr_fn

  # structural equality ignores source locations
  def create_eqfn(fields):
    keys = [ f.name for f in fields if f.type != 'srcinfo' ]
    def eq_fn(self, other):
      if type(self) is not type(other):
        return NotImplemented
      return all( getattr(self,k) == getattr(other,k) for k in keys )
    return eq_fn

  def install(C, C_name, fields):
    C.__init__    = create_initfn(C_name, fields)
    C.__repr__    = create_reprfn(C_name, fields)
    C.__eq__      = create_eqfn(fields)
    C.__hash__    = None
    C._fields     = tuple( f.name for f in fields )
    return C

  def create_sum(typ_name,t):
    T          = SC[typ_name]
    afields    = t.attributes
    for c in t.types:
      C        = install( type(c.name,(T,),{}), c.name,
                          c.fields + afields )
      if hasattr(mod,c.name):
        raise TypeError(f"name '{c.name}' conflict in module '{mod}'")
      setattr(T,c.name,C)
      setattr(mod,c.name,C)
    return T

  for nm,t in asdl_mod.types.items():
    if isinstance(t,asdl.Product):
      setattr(mod,nm,install(SC[nm],nm,t.fields))
    elif isinstance(t,asdl.Sum):
      setattr(mod,nm,create_sum(nm,t))
    else: assert False, "unexpected kind of asdl type"

  return mod

def ADT(asdl_str, ext_checks={}):
  """ Function that converts an ASDL grammar into a Python Module.

  The returned module will contain one class for every ASDL type
  declared in the input grammar, and one (sub-)class for every
  constructor in each of those types.  These constructors will
  type-check objects on construction to ensure conformity with the
  given grammar.

  ASDL Syntax
  -------
  module      ::= "module" Id "{" [definitions] "}"
  definitions ::= { TypeId "=" type }
  type        ::= product | sum
  product     ::= fields ["attributes" fields]
  fields      ::= "(" { field, "," } field ")"
  field       ::= TypeId ["?" | "*"] [Id]
  sum         ::= constructor { "|" constructor } ["attributes" fields]
  constructor ::= ConstructorId [fields]

  Parameters
  -------
  asdl_str : str
      The ASDL definition string
  ext_checks : dict of functions, optional
      Type-checking functions for all external (undefined) types
      that are not "built-in".
      "built-in" types, and corresponding Python types are
          'string'   str
          'int'      int
          'float'    float
          'bool'     bool
          'object'   (anything except None)

  Returns
  -------
  module
      The newly created module
  """
  asdl_ast = _asdl_parse(asdl_str)
  mod      = _build_classes(asdl_ast,ext_checks)
  mod._ext_checks = ext_checks
  mod._ast        = asdl_ast
  mod._defstr     = asdl_str

  mod.__doc__     = (f"ASDL Module Generated by ADT\n\n"
                     f"Original ASDL description:\n{asdl_str}")
  return mod
