"""Starter .gitglance.toml template."""

DEFAULT_TOML = """\
# gitglance configuration
version = "1.0"

[git]
executable = "git"        # path to the git binary

[log]
page_size = 50            # commits per page for `gitglance log`

[diff]
context_lines = 3         # --unified=N

[output]
format = "terminal"       # terminal | json | yaml
show_summary = true
"""
