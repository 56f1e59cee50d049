"""Starter .codereport.toml template."""

DEFAULT_TOML = """\
# codereport configuration
version = "1.0"

[project]
name = "Unknown Project"
home = "."
source_dirs = ["src/main/java"]
level = "prod"            # prod | test | misc

# One table per tool report fed to `codereport normalize`.
# [[reports]]
# format = "checkstyle"   # checkstyle | cpd | findbugs | pmd | jcoverage | cobertura | generic
# path = "build/checkstyle.xml"
#
# [[reports]]
# format = "generic"
# flavor = "javadoc"      # loads javadoc.xml from the format directories
# path = "build/javadoc.log"

[merge]
cpd_match_window = 33     # message prefix compared when pairing duplicate-code findings
# filters = ["filters/generated-code.yaml"]
# old_report = "previous/codereport.json"

[taxonomy]
# format_dirs = ["formats"]
custom_types_dir = ".codereport-types"
# findbugs_messages = ["tools/findbugs/messages.xml"]
# pmd_rulesets = ["tools/pmd/basic.xml"]

[output]
format = "terminal"       # terminal | json | sarif
show_summary = true
report_file = "codereport.json"

[logging]
level = "warning"         # debug | info | warning | error
"""
