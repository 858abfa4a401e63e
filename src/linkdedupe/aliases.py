from linkdedupe.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "xxh128": HashAlgorithmName.XXH128,
    "xxhash": HashAlgorithmName.XXH128,
    "sha1": HashAlgorithmName.SHA1,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content hash used to compare files:\n"
    "  xxh128, xxhash : xxHash3 128-bit (fast, default)\n"
    "  sha1           : SHA-1 (slower)\n"
)

NOTHING_TO_DEDUPE = "Nothing to dedupe ¯\\_(ツ)_/¯"

EPILOG_TEXT = """
Examples:
  Show which files would become symlinks, change nothing
  %(prog)s ~/Photos --dry-run

  Deduplicate only JPEG and PNG files
  %(prog)s ~/Photos -e '*.jpg' -e '*.png'

  Include hidden files and use 4 worker threads
  %(prog)s ~/Projects --hidden -j 4

Copies are replaced by relative symlinks to the first file found with the same
content. Symlinks are never followed or replaced, so running twice is safe.
"""
