"""Checkstyle message templates.

Order matters: classification walks the list and the first full match wins.
"""

from codereport.config.schema import Severity
from codereport.findings.models import Origin
from codereport.rules.models import FindingType


def _cs(symbol, short_text, description, pattern, severity=Severity.CODE_STYLE):
    return FindingType(
        symbol=symbol,
        short_text=short_text,
        description=description,
        severity=severity,
        pattern=pattern,
        origin=Origin.CHECKSTYLE,
    )


CS_INTERFACE_TYPE = _cs(
    "CS_INTERFACE_TYPE",
    "Interface type.",
    "Interfaces should describe a type and hence have methods.",
    r"interfaces should describe a type and hence have methods.",
    Severity.DESIGN,
)

CS_LINE_TO_LONG = _cs(
    "CS_LINE_TO_LONG",
    "Line too long.",
    "Line is longer than the allowed number of characters.",
    r"Line is longer than [0-9]+ characters.",
)

CS_HEADER_MISMATCH = _cs(
    "CS_HEADER_MISMATCH",
    "Header does not match.",
    "Line does not match expected header line. Please use the global header.",
    r"Line does not match expected header line of .*\.",
)

CS_JAVADOC_MISSING = _cs(
    "CS_JAVADOC_MISSING",
    "Missing a Javadoc comment.",
    "Missing a Javadoc comment.",
    r"Missing a Javadoc comment\.",
)

CS_JAVADOC_EMPTY_DESC = _cs(
    "CS_JAVADOC_EMPTY_DESC",
    "Javadoc has empty description section.",
    "Javadoc has empty description section.",
    r"Javadoc has empty description section\.",
)

CS_JAVADOC_UNUSED_TAG = _cs(
    "CS_JAVADOC_UNUSED_TAG",
    "Unused Javadoc tag.",
    "Unused Javadoc tag.",
    r"Unused .* tag for '.*'\.",
)

CS_JAVADOC_RETURN_EXPECTED = _cs(
    "CS_JAVADOC_RETURN_EXPECTED",
    "Expected an @return tag.",
    "Expected an @return tag.",
    r"Expected an @return tag.",
)

CS_JAVADOC_EXPECTED_TAG = _cs(
    "CS_JAVADOC_EXPECTED_TAG",
    "Missing Javadoc tag.",
    "Missing Javadoc tag.",
    r"Expected .* tag for '.*'\.",
)

CS_JAVADOC_CLASS_INFO = _cs(
    "CS_JAVADOC_CLASS_INFO",
    "Unable to get class information for something.",
    "Unable to get class information for something.",
    r"Unable to get class information for .* tag '.*'\.",
)

CS_JAVADOC_HTML_UNCLOSED = _cs(
    "CS_JAVADOC_HTML_UNCLOSED",
    "Incomplete HTML tag.",
    "Incomplete/Unclosed HTML tag.",
    r"Incomplete HTML tag found: .*",
)

CS_INVALID_PATTERN = _cs(
    "CS_INVALID_PATTERN",
    "Name does not match given pattern.",
    "Name does not match given pattern.",
    r"Name '.*' must match pattern '.*'\.",
)

CS_NO_WHITESPACE_AFTER_MSG_DECL = _cs(
    "CS_NO_WHITESPACE_AFTER_MSG_DECL",
    "Missing whitespace.",
    "After the method declaration there should be a ' '.",
    r"No whitespace \( \(\) after method declaration\.",
)

CS_TODO = _cs(
    "CS_TODO",
    "Comment matches to-do format.",
    "Comment matches to-do format.",
    r"Comment matches to-do format '.*'\.",
    Severity.INFO,
)

CS_MAGIC = _cs(
    "CS_MAGIC",
    "Dont use magics in the code.",
    "Magics make the code hard to maintain and understand. "
    "Define appropriate constant instead.",
    r"Dont use magic .* in the code\.",
)

CS_WHITESPACE_AFTER = _cs(
    "CS_WHITESPACE_AFTER",
    "Whitespace not allowed.",
    "Whitespace not allowed.",
    r"'.*' is followed by whitespace\.",
)

CS_NO_WHITESPACE_AFTER = _cs(
    "CS_NO_WHITESPACE_AFTER",
    "Whitespace expected.",
    "Whitespace expected.",
    r"'.*' is not followed by whitespace\.",
)

CS_WHITESPACE_BEFORE = _cs(
    "CS_WHITESPACE_BEFORE",
    "Whitespace not allowed.",
    "Whitespace not allowed.",
    r"'.*' is preceeded with whitespace\.",
)

CS_NO_WHITESPACE_BEFORE = _cs(
    "CS_NO_WHITESPACE_BEFORE",
    "Whitespace expected.",
    "Whitespace expected.",
    r"'.*' is not preceeded with whitespace\.",
)

CS_MISSING_TAG = _cs(
    "CS_MISSING_TAG",
    "A required javadoc tag is missing.",
    "A required javadoc tag is missing.",
    r"Type Javadoc comment is missing an .* tag\.",
)

CS_HIDDEN_FIELD = _cs(
    "CS_HIDDEN_FIELD",
    "A field is hidden.",
    "A field is hidden.",
    r"'.*' hides a field\.",
    Severity.DESIGN,
)

CS_CONTAINS_TAB = _cs(
    "CS_CONTAINS_TAB",
    "Line contains a tab character.",
    "Line contains a tab character. You should use spaces for indentation.",
    r"Line contains a tab character\.",
)

CS_NO_NEWLINE = _cs(
    "CS_NO_NEWLINE",
    "File does not end with a newline.",
    "File does not end with a newline.",
    r"File does not end with a newline\.",
)

CS_MAX_LEN_METHOD = _cs(
    "CS_MAX_LEN_METHOD",
    "Method length exceeds the maximum allowed length.",
    "A Method should have a moderate length...",
    r"Method length is [\.,0-9]+ lines \(max allowed is [\.,0-9]+\)\.",
    Severity.DESIGN,
)

CS_MAX_LEN_ANON_CLASS = _cs(
    "CS_MAX_LEN_ANON_CLASS",
    "Length of anonymous inner class exceeds the maximum allowed length.",
    "A anonymous inner class should have a moderate length...",
    r"Anonymous inner class length is [0-9]+ lines \(max allowed is [0-9]+\)\.",
    Severity.DESIGN,
)

CS_EMPTY_BLOCK = _cs(
    "CS_EMPTY_BLOCK",
    "Empty block detected.",
    "If you think this is ok you must at least put a comment inside "
    "this block, describing why it is ok.",
    r"Empty .* block\.",
)

CS_IMPORT_UNUSED = _cs(
    "CS_IMPORT_UNUSED",
    "Unused import.",
    "Unused import.",
    r"Unused import - .*\.",
)

CS_SPECIAL_INDENT = _cs(
    "CS_SPECIAL_INDENT",
    "Indentation violation.",
    "Several keywords require a special indentation.",
    r"Expected indentation for '.*' is '.*' but was at '.*'\.",
)

CS_NESTED_TRY_DEPTH = _cs(
    "CS_NESTED_TRY_DEPTH",
    "Deeply nested tries.",
    "The nesting level for the try/catches is to deep.",
    r"Nested try depth is [0-9]+ \(max allowed is [0-9]+\)\.",
    Severity.DESIGN,
)

CS_NUMBER_OF_PARAMETERS = _cs(
    "CS_NUMBER_OF_PARAMETERS",
    "Too many parameters.",
    "Too many parameters.",
    r"More than [0-9]+ parameters\.",
    Severity.DESIGN,
)

CS_METHOD_UNUSED = _cs(
    "CS_METHOD_UNUSED",
    "Method unused.",
    "Method is never used.",
    r"Unused private method '.*'\.",
)

CS_LOCAL_VARIABLE_UNUSED = _cs(
    "CS_LOCAL_VARIABLE_UNUSED",
    "Local variable unused.",
    "Local variable is never used.",
    r"Unused local variable '.*'\.",
)

CS_ILLEGAL_INDENTATION = _cs(
    "CS_ILLEGAL_INDENTATION",
    "Indentation must be a multiple of 4.",
    "Indentation must be a multiple of 4.",
    r"Indentation must be a multiple of 4\.",
)

CS_FIELD_UNUSED = _cs(
    "CS_FIELD_UNUSED",
    "Field unused.",
    "Field is never used.",
    r"Unused private field '.*'\.",
)

CS_EQUALS_NEWLINE = _cs(
    "CS_EQUALS_NEWLINE",
    "The equals operator should be on a new line.",
    "The equals operator should be on a new line.",
    r"The equals operator should be on a new line\.",
)

CS_ILLEGAL_PATTERN = _cs(
    "CS_ILLEGAL_PATTERN",
    "Line matches a illegal pattern.",
    "Line matches a illegal pattern.",
    r"Line matches the illegal pattern '.*'\.",
)

CS_UPPER_CASE_L = _cs(
    "CS_UPPER_CASE_L",
    "Use uppercase L.",
    "Long constants should use a uppercase L the lower case L looks "
    "a lot like 1. 123L vs. 123l.",
    r"Should use uppercase 'L'\.",
)

CS_NO_LOG_LEVEL_INFO = _cs(
    "CS_NO_LOG_LEVEL_INFO",
    "Invalid log level for trace log.",
    "Trace log messages should have log level smaller than info, for "
    "higher severity use predefined log messages.",
    r"Maximum allowed log level for trace log is '.*' but was '.*'\.",
    Severity.DESIGN,
)

CS_BRACE_ON_NEW_LINE = _cs(
    "CS_BRACE_ON_NEW_LINE",
    "The brace should not be on a new line.",
    "The brace should not be on a new line.",
    r"'[\{\}\(\)]' should be on the (previous|same) line\.",
)

CS_INLINE_CONDITIONAL = _cs(
    "CS_INLINE_CONDITIONAL",
    "Avoid inline conditionals.",
    "Avoid inline conditionals.",
    r"Avoid inline conditionals\.",
)

CS_REDUNDANT_MODIFIER = _cs(
    "CS_REDUNDANT_MODIFIER",
    "Avoid redundant code.",
    "Avoid redundant code.",
    r"Redundant '.*' modifier\.",
)

CS_JAVADOC_PATTERN = _cs(
    "CS_JAVADOC_PATTERN",
    "Javadoc pattern violation.",
    "The javadoc tag does not comply to the required pattern.",
    r"Type Javadoc tag .* must match pattern '.*'\.",
)

CS_REDUNDANT_THROWS_SUBCLASS = _cs(
    "CS_REDUNDANT_THROWS_SUBCLASS",
    "Redundant throws declaration of a subclass.",
    "The throws statement already contains the superclass and so "
    "declaring a subclass is redundant.",
    r"Redundant throws: '.*' is subclass of '.*'\.",
)

CS_REDUNDANT_THROWS_UNCHECKED = _cs(
    "CS_REDUNDANT_THROWS_UNCHECKED",
    "Throws declaration of a unchecked exception is not needed.",
    "Throws declaration of a unchecked exception is not needed.",
    r"Redundant throws: '.*' is unchecked exception\.",
)

CS_BOOLEAN_EXPRESSION_COMPLEXITY = _cs(
    "CS_BOOLEAN_EXPRESSION_COMPLEXITY",
    "Boolean expression is too complex.",
    "Boolean expression is too complex. Too many conditions leads to code "
    "that is difficult to read and hence debug and maintain.",
    r"Boolean expression complexity is .* \(max allowed is .*\)\.",
)

CS_STRING_EQUALS_COMPARISON = _cs(
    "CS_STRING_EQUALS_COMPARISON",
    "String comparison with ==.",
    "String comparison with ==.",
    r"Literal Strings should be compared using equals\(\), not '=='\.",
)

CS_MISSING_PACKAGE_DOCUMENTATION = _cs(
    "CS_MISSING_PACKAGE_DOCUMENTATION",
    "Missing package documentation file.",
    "Package content should be documented using a package.html or "
    "package-info.java file.",
    r"Missing package documentation file\.",
)

CS_EXCEPTION_CLASS_NOT_FOUND = _cs(
    "CS_EXCEPTION_CLASS_NOT_FOUND",
    "Unable to get class information for certain class.",
    "Mostly this is caused by a checkstyle internal issue or a finder "
    "class path setting.",
    r"Unable to get class information for .*\.",
)

CS_TYPE_NOT_ALLOWED = _cs(
    "CS_TYPE_NOT_ALLOWED",
    "Use of a type that is not permited.",
    "The type noted in the message should not be used.",
    r"Using '.*' is not allowed\.",
)

CS_EXCEPTION = _cs(
    "CS_EXCEPTION",
    "Checkstyle analysis exception.",
    "Exception during checkstyle analysis. A frequent cause is a reference "
    "to an unknown or not visible class in Javadoc.",
    r"Got an exception - .*\.",
)

ALL_CHECKSTYLE_TYPES = [
    CS_INTERFACE_TYPE,
    CS_LINE_TO_LONG,
    CS_HEADER_MISMATCH,
    CS_JAVADOC_MISSING,
    CS_JAVADOC_EMPTY_DESC,
    CS_JAVADOC_UNUSED_TAG,
    CS_JAVADOC_RETURN_EXPECTED,
    CS_JAVADOC_EXPECTED_TAG,
    CS_JAVADOC_CLASS_INFO,
    CS_JAVADOC_HTML_UNCLOSED,
    CS_INVALID_PATTERN,
    CS_NO_WHITESPACE_AFTER_MSG_DECL,
    CS_TODO,
    CS_MAGIC,
    CS_WHITESPACE_AFTER,
    CS_NO_WHITESPACE_AFTER,
    CS_WHITESPACE_BEFORE,
    CS_NO_WHITESPACE_BEFORE,
    CS_MISSING_TAG,
    CS_HIDDEN_FIELD,
    CS_CONTAINS_TAB,
    CS_NO_NEWLINE,
    CS_MAX_LEN_METHOD,
    CS_MAX_LEN_ANON_CLASS,
    CS_EMPTY_BLOCK,
    CS_IMPORT_UNUSED,
    CS_SPECIAL_INDENT,
    CS_NESTED_TRY_DEPTH,
    CS_NUMBER_OF_PARAMETERS,
    CS_METHOD_UNUSED,
    CS_LOCAL_VARIABLE_UNUSED,
    CS_ILLEGAL_INDENTATION,
    CS_FIELD_UNUSED,
    CS_EQUALS_NEWLINE,
    CS_ILLEGAL_PATTERN,
    CS_UPPER_CASE_L,
    CS_NO_LOG_LEVEL_INFO,
    CS_BRACE_ON_NEW_LINE,
    CS_INLINE_CONDITIONAL,
    CS_REDUNDANT_MODIFIER,
    CS_JAVADOC_PATTERN,
    CS_REDUNDANT_THROWS_SUBCLASS,
    CS_REDUNDANT_THROWS_UNCHECKED,
    CS_BOOLEAN_EXPRESSION_COMPLEXITY,
    CS_STRING_EQUALS_COMPARISON,
    CS_MISSING_PACKAGE_DOCUMENTATION,
    CS_EXCEPTION_CLASS_NOT_FOUND,
    CS_TYPE_NOT_ALLOWED,
    CS_EXCEPTION,
]
