"""Commit message template."""
from pathlib import Path
from typing import Optional, Tuple

TEMPLATE_FILENAME = "commit-template.txt"

DEFAULT_COMMIT_TEMPLATE = """\
# <type>(<scope>): <subject>
#
# <body>
#
# <footer>

# Types:
#   feat:     A new feature
#   fix:      A bug fix
#   docs:     Documentation only changes
#   style:    Changes that do not affect the meaning of the code
#   refactor: A code change that neither fixes a bug nor adds a feature
#   perf:     A code change that improves performance
#   test:     Adding missing tests or correcting existing tests
#   chore:    Changes to the build process or auxiliary tools
#   ci:       Changes to CI configuration files and scripts
#   build:    Changes that affect the build system or external dependencies
#   revert:   Reverts a previous commit
#
# Scope: optional, can be anything specifying the scope of the commit
# Subject: short summary (50 chars or less, imperative mood)
# Body: optional, longer explanation (wrap at 72 chars)
# Footer: optional, for breaking changes or issue references
#
# Examples:
#   feat(auth): add user login functionality
#   fix(api): correct user endpoint response format
#   docs: update README with installation instructions
#   refactor(utils): simplify date formatting logic"""


def load_commit_template(repo_root: Optional[Path] = None) -> Tuple[str, Optional[Path]]:
    """Return the template text and the file it came from.

    A ``commit-template.txt`` in the repository root wins over the built-in
    template. The path is None when the built-in template is used.
    """
    if repo_root is not None:
        path = repo_root / TEMPLATE_FILENAME
        if path.is_file():
            return path.read_text(encoding="utf-8"), path
    return DEFAULT_COMMIT_TEMPLATE, None
