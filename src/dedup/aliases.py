from dedup.core.models import Action, HashAlgorithmName

ACTION_ALIASES = {
    "d": Action.DELETE,
    "r": Action.DELETE,
    "rm": Action.DELETE,
    "l": Action.LINK,
    "li": Action.LINK,
    "lin": Action.LINK,
    "link": Action.LINK,
    "m": Action.MOVE,
    "mv": Action.MOVE,
    "c": Action.EVICT_CACHE,
}

ACTION_PROMPT = "Action? (d,l,m,c) "

ALGORITHM_ALIASES = {
    "md5": HashAlgorithmName.MD5,
    "xxhash": HashAlgorithmName.XXHASH,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content digest used to identify duplicates:\n"
    "  md5    : MD5 (default)\n"
    "  xxhash : xxHash64 (faster, non-cryptographic)\n"
    "The checksum cache only keeps digests of the algorithm in use;\n"
    "switching algorithms discards the cached entries of the other one."
)

EPILOG_TEXT = """
Resolving duplicates (--dedup):
  Each set of duplicates is shown as a numbered list followed by a prompt.
  Answer with an action optionally followed by numbers from the list:

  d N ... | rm N ...   Delete the indicated files. Does nothing without numbers.
  l N ... | link N ... Hard-link the indicated files to the first one given.
                       Defaults to all files if no numbers are given.
  m A B   | mv A B     Delete B and move A into the directory B was in.
                       Requires exactly two numbers.
  c N ...              Clear the cached checksum of the indicated files.
                       Defaults to all files if no numbers are given.

  An empty answer moves on to the next set.

Examples:
  Find duplicates under ~/Pictures, caching checksums for the next run
  %(prog)s --base ~/Pictures --dedup

  Same as above but without creating the checksum cache
  %(prog)s --base ~/Pictures --dedup --no-dedup-cache

  Show the 25 largest and oldest files, size weighted twice as much as age
  %(prog)s --base ~/Pictures --rank --rank-weight-size 2.0
"""
