import sys
from typing import NoReturn

import colorama

import ecc256k1
from ecc256k1.cli import main_ecdh, main_keygen, main_pubkey, main_sign, main_verify

hdrhelp = """\
Usage:
  ecc256k1 keygen [--pem]
  ecc256k1 pubkey -k SKEY [--uncompressed | --xonly]
  ecc256k1 sign -k SKEY [--schnorr] [--compact] [message]
  ecc256k1 verify -p PKEY -s SIG [--schnorr] [--compact] [message]
  ecc256k1 ecdh -k SKEY -p PKEY

Note: the message is read from stdin unless given on the command line. ECDSA
signs the SHA-256 of the message, Schnorr signs the message itself (BIP-340).
"""

opthelp = """\
  -k SKEY           Secret key (hex or PEM file)
  -p PKEY           Public key (hex or PEM file, x-only hex for Schnorr)
  -s SIG            Signature (hex, DER for ECDSA unless --compact)
  --schnorr         BIP-340 Schnorr rather than ECDSA
  --compact         ECDSA signature as 64 bytes r || s instead of DER
"""

cmdhelp = f"""\
ecc256k1 {ecc256k1.__version__} - secp256k1 ECDSA, ECDH and Schnorr in plain Python
 💣  Not constant time: do not use with keys that need protection

{hdrhelp}
{opthelp}
"""


class Args:

  def __init__(self):
    self.files = []
    self.secret = ""
    self.public = ""
    self.signature = ""
    self.schnorr = None
    self.compact = None
    self.pem = None
    self.uncompressed = None
    self.xonly = None
    self.debug = None


keygenargs = dict(
  pem='--pem'.split(),
  debug='--debug'.split(),
)

pubkeyargs = dict(
  secret='-k --key --secret'.split(),
  uncompressed='-u --uncompressed'.split(),
  xonly='-x --xonly'.split(),
  debug='--debug'.split(),
)

signargs = dict(
  secret='-k --key --secret'.split(),
  schnorr='--schnorr'.split(),
  compact='--compact'.split(),
  debug='--debug'.split(),
)

verifyargs = dict(
  public='-p --pubkey --public'.split(),
  signature='-s --sig --signature'.split(),
  schnorr='--schnorr'.split(),
  compact='--compact'.split(),
  debug='--debug'.split(),
)

ecdhargs = dict(
  secret='-k --key --secret'.split(),
  public='-p --pubkey --public'.split(),
  debug='--debug'.split(),
)

modes = {
  "keygen": (main_keygen, keygenargs),
  "pubkey": (main_pubkey, pubkeyargs),
  "sign": (main_sign, signargs),
  "verify": (main_verify, verifyargs),
  "ecdh": (main_ecdh, ecdhargs),
}

def argparse():
  # Custom parsing due to argparse module's limitations
  av = sys.argv[1:]
  if not av or any(a.lower() in ('-h', '--help') for a in av):
    first, rest = cmdhelp.rstrip().split('\n', 1)
    if sys.stdout.isatty():
      print(f'\x1B[1;44m{first:78}\x1B[0m\n{rest}')
    else:
      print(f'{first}\n{rest}')
    sys.exit(0)
  if any(a.lower() in ('-v', '--version') for a in av):
    print(cmdhelp.split('\n')[0])
    sys.exit(0)
  args = Args()
  if av[0] not in modes:
    sys.stderr.write(' 💣  Invalid or missing command (keygen/pubkey/sign/verify/ecdh).\n')
    sys.exit(1)
  args.mode = av[0]
  ad = modes[args.mode][1]
  modehelp = f"{hdrhelp}\nOptions:\n{opthelp}"

  aiter = iter(av[1:])
  for a in aiter:
    if a == '-':
      continue  # stdin is the default source of the message
    if not a.startswith('-'):
      args.files.append(a)
      continue
    if a == '--':
      args.files += aiter
      break
    if a.startswith('--'):
      a = a.lower()
    argvar = next((k for k, v in ad.items() if a in v), None)
    if argvar is None:
      sys.stderr.write(f'{modehelp}\n 💣  Unknown argument: ecc256k1 {args.mode} {a}\n')
      sys.exit(1)
    try:
      var = getattr(args, argvar)
      if isinstance(var, str):
        setattr(args, argvar, next(aiter))
      else:
        setattr(args, argvar, True)
    except StopIteration:
      sys.stderr.write(f'{modehelp}\n 💣  Argument parameter missing: ecc256k1 {args.mode} {a} …\n')
      sys.exit(1)

  if args.uncompressed and args.xonly:
    sys.stderr.write(' 💣  Only one of --uncompressed and --xonly may be used.\n')
    sys.exit(1)
  return args


def main() -> NoReturn:
  """
  The main CLI entry point.

  Consider calling ecc256k1.ecdsa, ecc256k1.schnorr or ecc256k1.ecdh directly if you use from Python code.

  System exit codes:
  * 0 The requested function was completed successfully
  * 1 CLI argument error
  * 2 Interrupted
  * 3 I/O error (broken pipe)
  * 10 Invalid keys, signatures or other input (including signature mismatch)

  :raises SystemExit: on normal exit or any expected error, including KeyboardInterrupt
  :raises Exception: on unexpected error (report a bug), or on any error with `--debug`
  """
  colorama.init()
  args = argparse()
  mainfunc = modes[args.mode][0]
  if args.debug:
    mainfunc(args)  # --debug makes us not catch errors
    sys.exit(0)
  try:
    mainfunc(args)
  except ValueError as e:
    sys.stderr.write(f"Error: {e}\n")
    sys.exit(10)
  except BrokenPipeError:
    sys.stderr.write('I/O error (broken pipe)\n')
    sys.exit(3)
  except KeyboardInterrupt:
    sys.stderr.write("Interrupted.\n")
    sys.exit(2)
  sys.exit(0)

if __name__ == "__main__":
  main()
