"""Tree-sitter queries for Bash extraction.

One query per extraction category. Capture labels starting with ``_`` are
filter-only (used by predicates) and carry no semantic meaning.

Capture contract (read by the transforms and the extraction driver):

- functions:    @function, @function.name, @function.params, @function.body
- strings:      @string.value
- imports:      @import, @import.from, @_cmd
- exports:      @export, @export.name, @_flag
- doc_comments: @doc.content
"""

from __future__ import annotations

# Bash supports three function syntaxes, all parsed into the same node:
#   function foo() { }   foo() { }   function foo { }
# The body doubles as the params capture: bash declares parameters
# implicitly through $1, $2, $@ inside the body.
FUNCTIONS_QUERY = """
(function_definition
  name: (word) @function.name
  body: (compound_statement) @function.params @function.body) @function
"""

STRINGS_QUERY = """
; Single-quoted strings (raw, no expansion)
(raw_string) @string.value

; Double-quoted strings (with expansion)
(string) @string.value

; ANSI-C quoted strings ($'...')
(ansi_c_string) @string.value

; Here-document bodies
(heredoc_body) @string.value

; Here-strings with a bare word (<<< word)
(herestring_redirect
  (word) @string.value)
"""

# `source path` and `. path` are equivalent.
IMPORTS_QUERY = r"""
(command
  name: (command_name
    (word) @_cmd)
  argument: (word) @import.from
  (#match? @_cmd "^(source|\\.)$")) @import

(command
  name: (command_name
    (word) @_cmd)
  argument: (string) @import.from
  (#match? @_cmd "^(source|\\.)$")) @import

(command
  name: (command_name
    (word) @_cmd)
  argument: (raw_string) @import.from
  (#match? @_cmd "^(source|\\.)$")) @import

; Paths assembled at runtime: $DIR/x.sh, ${LIB}, $(cmd)
(command
  name: (command_name
    (word) @_cmd)
  argument: [
    (concatenation)
    (simple_expansion)
    (expansion)
    (command_substitution)
  ] @import.from
  (#match? @_cmd "^(source|\\.)$")) @import
"""

# export/declare/typeset parse as declaration_command, not command. The
# keyword is an anonymous child; flags are word nodes.
EXPORTS_QUERY = """
(declaration_command
  "export"
  (variable_assignment
    name: (variable_name) @export.name)) @export

(declaration_command
  "export"
  (variable_name) @export.name) @export

(declaration_command
  "export"
  (word) @_flag
  (variable_name) @export.name
  (#eq? @_flag "-f")) @export

(declaration_command
  "declare"
  (word) @_flag
  (variable_assignment
    name: (variable_name) @export.name)
  (#match? @_flag "^-.*x")) @export

(declaration_command
  "declare"
  (word) @_flag
  (variable_name) @export.name
  (#match? @_flag "^-.*x")) @export

(declaration_command
  "typeset"
  (word) @_flag
  (variable_assignment
    name: (variable_name) @export.name)
  (#match? @_flag "^-.*x")) @export

(declaration_command
  "typeset"
  (word) @_flag
  (variable_name) @export.name
  (#match? @_flag "^-.*x")) @export
"""

# Consecutive comment lines form a block; block assembly is the driver's job.
DOC_COMMENTS_QUERY = """
(comment) @doc.content
"""
