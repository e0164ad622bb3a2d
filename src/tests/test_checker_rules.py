"""
Tests para las reglas del checker.
Cada clase agrupa una familia de reglas; los programas son mínimos.
"""

import pytest

from semantic.checker import analyze, PseudocodeChecker
from semantic.config import CheckerConfig
from semantic.errors import CheckerError
from semantic import diagnostics as codes


def messages(result, line=None):
    return [d.message for d in result.diagnostics if line is None or d.line == line]


def codes_on(result, line):
    return {d.code for d in result.diagnostics if d.line == line}


class TestReferenceExamples:
    """Los seis ejemplos de referencia del dialecto."""

    def test_declare_assign_output_is_valid(self):
        res = analyze("DECLARE x: INTEGER\nx ← 5\nOUTPUT x")
        assert res.is_valid
        assert res.diagnostics == []

    def test_equals_instead_of_arrow(self):
        res = analyze("DECLARE x: INTEGER\nx = 5")
        assert not res.is_valid
        assert "Use ← for assignment instead of = (Cambridge rule)" in messages(res, 2)

    def test_array_out_of_range(self):
        res = analyze("DECLARE arr: ARRAY[1:5] OF INTEGER\nOUTPUT arr[10]")
        assert not res.is_valid
        assert "Array index 10 is out of bounds. Array 'arr' valid range is [1:5]" in messages(res, 2)

    def test_if_without_endif(self):
        res = analyze('IF x THEN\n   OUTPUT "hi"')
        assert not res.is_valid
        assert "Unmatched IF - missing ENDIF" in messages(res, 1)

    def test_lowercase_keywords(self):
        res = analyze("declare x: integer")
        assert not res.is_valid
        msgs = messages(res, 1)
        assert "Keyword 'declare' should be uppercase: 'DECLARE'" in msgs
        assert "Keyword 'integer' should be uppercase: 'INTEGER'" in msgs

    def test_assignment_to_undeclared(self):
        res = analyze("y ← 5")
        assert not res.is_valid
        assert "Variable 'y' must be declared before use" in messages(res, 1)


class TestEmptyInput:

    @pytest.mark.parametrize("code", ["", "\n\n   \n", "// solo comentario", "// a\n   // b\n\n"])
    def test_only_blank_or_comments(self, code):
        res = analyze(code)
        assert not res.is_valid
        assert len(res.diagnostics) == 1
        d = res.diagnostics[0]
        assert d.line == 1
        assert d.code == codes.E_NO_CONTENT
        assert d.message == "No pseudocode content found. Please write some pseudocode."

    def test_non_string_input_raises(self):
        with pytest.raises(CheckerError):
            analyze(None)


class TestIndentation:

    def test_two_spaces_is_a_warning(self):
        res = analyze("DECLARE x : INTEGER\n  x ← 1")
        assert res.is_valid
        assert len(res.warnings) == 1
        assert res.warnings[0].line == 2
        assert res.warnings[0].message == "Indentation should be multiples of 3 spaces"

    def test_custom_indent_unit(self):
        res = analyze("DECLARE x : INTEGER\n  x ← 1", CheckerConfig(indent_unit=2))
        assert res.diagnostics == []


class TestAssignmentOperator:

    def test_equals_in_condition_is_comparison(self):
        code = "DECLARE a : INTEGER\nDECLARE b : INTEGER\nIF a = b THEN\n   OUTPUT a\nENDIF"
        res = analyze(code)
        assert res.is_valid, res.diagnostics

    def test_relational_operators_are_not_assignment(self):
        res = analyze("DECLARE a : INTEGER\nOUTPUT a >= 3\nOUTPUT a <= 3")
        assert codes.E_ASSIGN_OP not in {d.code for d in res.diagnostics}

    def test_equals_inside_string_is_ignored(self):
        res = analyze('OUTPUT "a = b"')
        assert res.is_valid

    def test_constant_uses_equals(self):
        res = analyze("CONSTANT Pi = 3.14")
        assert res.is_valid, res.diagnostics


class TestIdentifiers:

    def test_leading_digit(self):
        res = analyze("DECLARE 2nd : INTEGER")
        assert "Identifier '2nd' cannot start with a number" in messages(res, 1)

    def test_invalid_characters(self):
        res = analyze("DECLARE café : STRING")
        assert "Identifier 'café' contains invalid characters" in messages(res, 1)

    def test_numbers_are_not_identifiers(self):
        res = analyze("DECLARE n : REAL\nn ← 42.5")
        assert res.is_valid

    def test_one_diagnostic_per_malformed_token(self):
        res = analyze("DECLARE 1a, 2b : INTEGER")
        bad = [d for d in res.diagnostics if d.code == codes.E_IDENTIFIER]
        assert len(bad) == 2


class TestLineStructure:

    def test_plain_words_are_not_pseudocode(self):
        res = analyze("hello world")
        assert codes.E_UNRECOGNIZED in codes_on(res, 1)

    def test_unknown_all_caps_keyword(self):
        res = analyze("PRINT x")
        assert "Unknown keyword: PRINT" in messages(res, 1)

    def test_caps_identifier_before_arrow(self):
        res = analyze("DECLARE MAX : INTEGER\nMAX ← 3")
        assert res.is_valid, res.diagnostics

    def test_keyword_inside_string_keeps_case(self):
        res = analyze('OUTPUT "if you can"')
        assert res.is_valid

    def test_mixed_case_keyword(self):
        res = analyze("DECLARE x : INTEGER\nOutput x")
        assert "Keyword 'Output' should be uppercase: 'OUTPUT'" in messages(res, 2)

    def test_foreign_keyword(self):
        res = analyze("DECLARE i : INTEGER\nWHILE i < 3 DO\n   i ← i + 1\nENDWHILE")
        assert "'DO' is not a valid Cambridge pseudocode keyword" in messages(res, 2)

    @pytest.mark.parametrize("word", ["switch", "CONTINUE", "Try"])
    def test_foreign_keyword_any_case(self, word):
        res = analyze(f"DECLARE x : INTEGER\nx ← 1 {word}")
        assert f"'{word}' is not a valid Cambridge pseudocode keyword" in messages(res, 2)


class TestBlocks:

    def test_for_next_is_valid(self):
        res = analyze("DECLARE i : INTEGER\nFOR i ← 1 TO 3\n   OUTPUT i\nNEXT i")
        assert res.is_valid, res.diagnostics

    def test_wrong_closer_reports_both_angles(self):
        res = analyze("IF TRUE THEN\nENDWHILE")
        msgs = messages(res, 2)
        assert "Expected ENDIF but found ENDWHILE" in msgs
        assert "Extra ENDWHILE - no matching opening block" in msgs

    def test_unexpected_closer(self):
        res = analyze("ENDIF")
        unexpected = [m for m in messages(res) if m.startswith("Unexpected ENDIF")]
        assert unexpected == ["Unexpected ENDIF without matching opening"]

    def test_all_unclosed_openers_reported(self):
        res = analyze("IF TRUE THEN\n   WHILE TRUE\n      REPEAT")
        unmatched = [d for d in res.diagnostics if d.message.startswith("Unmatched")]
        assert [(d.line, d.message) for d in unmatched] == [
            (1, "Unmatched IF - missing ENDIF"),
            (2, "Unmatched WHILE - missing ENDWHILE"),
            (3, "Unmatched REPEAT - missing UNTIL"),
        ]

    @pytest.mark.parametrize("opened,closed", [(0, 1), (1, 0), (2, 1), (2, 2), (1, 3), (3, 0)])
    def test_stack_discipline(self, opened, closed):
        code = "\n".join(["IF TRUE THEN"] * opened + ["ENDIF"] * closed)
        res = analyze(code)
        unmatched = [m for m in messages(res) if m.startswith("Unmatched IF")]
        unexpected = [m for m in messages(res) if m.startswith("Unexpected ENDIF")]
        assert len(unmatched) == max(opened - closed, 0)
        assert len(unexpected) == max(closed - opened, 0)

    def test_repeat_until(self):
        res = analyze("DECLARE n : INTEGER\nn ← 0\nREPEAT\n   n ← n + 1\nUNTIL n = 3")
        assert res.is_valid, res.diagnostics


class TestDeclarations:

    def test_missing_colon(self):
        res = analyze("DECLARE x INTEGER")
        assert "DECLARE statement must specify variable type with colon (:)" in messages(res, 1)

    def test_reserved_name(self):
        res = analyze("DECLARE OUTPUT : INTEGER")
        assert "'OUTPUT' is a reserved keyword and cannot be used as a variable name" in messages(res, 1)

    def test_redeclared_with_other_type(self):
        res = analyze("DECLARE x : INTEGER\nDECLARE x : STRING")
        assert not res.is_valid
        assert (
            "Variable 'x' redeclared with different type. Previously declared as INTEGER on line 1"
            in messages(res, 2)
        )

    def test_redeclared_with_same_type_is_warning(self):
        res = analyze("DECLARE x : INTEGER\nDECLARE x : INTEGER")
        assert res.is_valid
        assert messages(res) == ["Variable 'x' already declared on line 1"]

    def test_type_text_whitespace_is_normalized(self):
        res = analyze("DECLARE a : ARRAY[1:3] OF INTEGER\nDECLARE a : ARRAY[1:3]  OF   INTEGER")
        assert codes.E_REDECLARED_TYPE not in {d.code for d in res.diagnostics}

    @pytest.mark.parametrize("name", ["total", "Count", "x1", "my_value"])
    def test_single_declaration_never_redeclared(self, name):
        res = analyze(f"DECLARE {name} : INTEGER\n{name} ← 1\nOUTPUT {name}")
        redeclared = {codes.E_REDECLARED_TYPE, codes.W_REDECLARED}
        assert not redeclared & {d.code for d in res.diagnostics}

    def test_name_list(self):
        res = analyze("DECLARE a, b : INTEGER\na ← 1\nb ← 2")
        assert res.is_valid

    def test_array_needs_brackets(self):
        res = analyze("DECLARE arr : ARRAY OF INTEGER")
        assert "ARRAY declaration must include index range in square brackets [start:end]" in messages(res, 1)

    def test_array_shape_checked_without_colon(self):
        msgs = messages(analyze("DECLARE arr ARRAY INTEGER"), 1)
        assert "DECLARE statement must specify variable type with colon (:)" in msgs
        assert "ARRAY declaration must include index range in square brackets [start:end]" in msgs
        assert "ARRAY declaration must include OF keyword" in msgs

    def test_array_needs_of(self):
        res = analyze("DECLARE arr : ARRAY[1:3] INTEGER")
        assert "ARRAY declaration must include OF keyword" in messages(res, 1)

    def test_char_declaration_with_double_quotes(self):
        res = analyze('DECLARE c : CHAR = "A"')
        assert "CHAR literals must use single quotes ('), not double quotes (\")" in messages(res, 1)


class TestConstants:

    def test_constant_with_arrow(self):
        msgs = messages(analyze("CONSTANT Pi ← 3.14"), 1)
        assert "CONSTANT must be assigned a value using =" in msgs
        assert "CONSTANT declarations use = not ←" in msgs

    def test_constant_is_declared(self):
        res = analyze("CONSTANT Max = 10\nOUTPUT Max")
        assert res.is_valid, res.diagnostics


class TestSubprograms:

    def test_function_needs_returns(self):
        res = analyze("FUNCTION Add(a : INTEGER, b : INTEGER)\n   RETURN a + b\nENDFUNCTION")
        assert "FUNCTION must specify return type with RETURNS" in messages(res, 1)

    def test_parameters_are_visible_in_body(self):
        res = analyze("PROCEDURE Show(BYREF msg : STRING)\n   OUTPUT msg\nENDPROCEDURE")
        assert res.is_valid, res.diagnostics
        entries = res.symbols[0]["entries"]
        assert {"name": "msg", "kind": "param", "type": "STRING", "line": 1} in entries

    def test_call_on_function(self):
        code = "FUNCTION Twice(n : INTEGER) RETURNS INTEGER\n   RETURN n * 2\nENDFUNCTION\nCALL Twice(3)"
        res = analyze(code)
        assert "CALL should not be used with functions. Use function calls directly: Twice(...)" in messages(res, 4)

    def test_call_on_procedure(self):
        res = analyze('PROCEDURE Greet()\n   OUTPUT "hi"\nENDPROCEDURE\nCALL Greet()')
        assert res.is_valid, res.diagnostics

    def test_function_call_is_not_a_variable(self):
        code = "FUNCTION F(n : INTEGER) RETURNS INTEGER\n   RETURN n\nENDFUNCTION\nOUTPUT F(2)"
        assert analyze(code).is_valid


class TestUsage:

    def test_output_undeclared(self):
        res = analyze("OUTPUT total")
        assert "Variable 'total' must be declared before use" in messages(res, 1)

    def test_input_undeclared(self):
        res = analyze("INPUT age")
        assert "Variable 'age' must be declared before use" in messages(res, 1)

    def test_declaration_must_come_first(self):
        res = analyze("OUTPUT n\nDECLARE n : INTEGER")
        assert "Variable 'n' must be declared before use" in messages(res, 1)

    def test_unclosed_string_suppresses_usage(self):
        res = analyze('OUTPUT "hello, name')
        found = {d.code for d in res.diagnostics}
        assert codes.E_UNCLOSED_STRING in found
        assert codes.E_UNDECLARED not in found

    def test_record_field_is_skipped(self):
        res = analyze("DECLARE rec : Student\nOUTPUT rec.Name")
        assert res.is_valid, res.diagnostics

    def test_duplicates_collapse(self):
        res = analyze("OUTPUT x + x")
        assert messages(res).count("Variable 'x' must be declared before use") == 1


class TestArrays:

    def test_bounds_are_inclusive(self):
        res = analyze("DECLARE arr : ARRAY[1:5] OF INTEGER\nOUTPUT arr[5]\nOUTPUT arr[1]")
        assert res.is_valid, res.diagnostics

    def test_negative_bounds(self):
        res = analyze("DECLARE t : ARRAY[-2:2] OF INTEGER\nOUTPUT t[-3]\nOUTPUT t[0]")
        assert "Array index -3 is out of bounds. Array 't' valid range is [-2:2]" in messages(res, 2)
        assert messages(res, 3) == []

    def test_access_inside_string_is_ignored(self):
        res = analyze('DECLARE arr : ARRAY[1:5] OF INTEGER\nOUTPUT "arr[9]"')
        assert res.is_valid


class TestCharAndStrings:

    def test_empty_char(self):
        res = analyze("DECLARE c : CHAR\nc ← ''")
        assert "Empty CHAR literal - CHAR must contain exactly one character" in messages(res, 2)

    def test_char_too_long(self):
        res = analyze("DECLARE c : CHAR\nc ← 'ab'")
        assert "CHAR literal can only contain one character. Use double quotes for strings" in messages(res, 2)

    def test_escaped_char(self):
        res = analyze("DECLARE c : CHAR\nc ← '\\n'")
        assert codes.E_CHAR_LITERAL not in codes_on(res, 2)

    def test_char_variable_with_double_quotes(self):
        res = analyze('DECLARE c : CHAR\nc ← "a"')
        assert (
            "CHAR variable 'c' must use single quotes (') for character literals, not double quotes (\")"
            in messages(res, 2)
        )

    def test_apostrophe_inside_string(self):
        assert analyze('OUTPUT "it\'s fine"').is_valid

    def test_unclosed_string(self):
        res = analyze('OUTPUT "abc')
        assert "Unclosed string - missing closing quote" in messages(res, 1)

    @pytest.mark.parametrize("code", ['OUTPUT "Please input a value', 'OUTPUT "Do it now', 'OUTPUT "2nd café'])
    def test_unclosed_string_text_is_not_checked(self, code):
        res = analyze(code)
        assert messages(res) == ["Unclosed string - missing closing quote"]


class TestStatementShapes:

    def test_for_without_arrow(self):
        res = analyze("DECLARE i : INTEGER\nFOR i = 1 TO 3\n   OUTPUT i\nNEXT i")
        assert "FOR loop must use format: FOR variable ← start TO end" in messages(res, 2)

    def test_case_of_line_is_accepted(self):
        res = analyze("DECLARE x : INTEGER\nCASE OF x\nENDCASE")
        assert res.is_valid, res.diagnostics

    def test_case_shape_only_applies_to_case_of(self):
        res = analyze("DECLARE x : INTEGER\nCASE x\nENDCASE")
        assert codes.E_STATEMENT not in {d.code for d in res.diagnostics}

    def test_while_with_parentheses(self):
        res = analyze("DECLARE n : INTEGER\nWHILE (n < 3)\n   n ← n + 1\nENDWHILE")
        assert "WHILE conditions should not use parentheses in Cambridge pseudocode" in messages(res, 2)

    def test_openfile_invalid_mode(self):
        res = analyze('OPENFILE "f.txt" FOR READONLY')
        assert "Invalid file mode 'READONLY'. Valid modes are: READ, WRITE, APPEND" in messages(res, 1)

    def test_openfile_mode_case_insensitive(self):
        res = analyze('OPENFILE "f.txt" FOR append')
        assert codes.E_FILE_MODE not in codes_on(res, 1)

    def test_openfile_malformed(self):
        res = analyze('OPENFILE "f.txt" FOR')
        assert "OPENFILE syntax should be: OPENFILE filename FOR mode (READ/WRITE/APPEND)" in messages(res, 1)

    def test_openfile_custom_modes(self):
        res = analyze('OPENFILE "f.txt" FOR RANDOM', CheckerConfig(file_modes=("READ", "RANDOM")))
        assert codes.E_FILE_MODE not in codes_on(res, 1)


class TestSweeps:

    def test_endfor(self):
        res = analyze("DECLARE i : INTEGER\nFOR i ← 1 TO 3\n   OUTPUT i\nENDFOR")
        assert "FOR loops must end with NEXT, not ENDFOR" in messages(res, 4)

    def test_length_on_integer(self):
        res = analyze("DECLARE n : INTEGER\nOUTPUT LENGTH(n)")
        assert "LENGTH() can only be used with STRING or ARRAY variables, not INTEGER" in messages(res, 2)

    def test_length_sees_later_declarations(self):
        res = analyze("OUTPUT LENGTH(s)\nDECLARE s : INTEGER")
        assert "LENGTH() can only be used with STRING or ARRAY variables, not INTEGER" in messages(res, 1)

    def test_length_on_array(self):
        res = analyze("DECLARE arr : ARRAY[1:3] OF CHAR\nOUTPUT LENGTH(arr)")
        assert res.is_valid, res.diagnostics

    def test_empty_for_body(self):
        res = analyze("DECLARE i : INTEGER\nFOR i ← 1 TO 3\nNEXT i")
        assert res.is_valid
        assert [(d.line, d.message) for d in res.warnings] == [
            (2, "Empty FOR loop body - consider adding statements or removing the loop"),
        ]

    def test_empty_for_body_skips_blank_and_comment_lines(self):
        res = analyze("DECLARE i : INTEGER\nFOR i ← 1 TO 3\n\n   // nada\nNEXT i")
        assert codes.W_EMPTY_LOOP in {d.code for d in res.warnings}

    def test_for_body_with_statement(self):
        res = analyze("DECLARE i : INTEGER\nFOR i ← 1 TO 3\n   OUTPUT i\nNEXT i")
        assert res.warnings == []


class TestResultInvariants:

    PROGRAMS = [
        "DECLARE x: INTEGER\nx ← 5\nOUTPUT x",
        "DECLARE x : INTEGER\n  x ← 1",
        "IF TRUE THEN\nENDWHILE\nENDWHILE",
        "OUTPUT x + x + y",
        "declare x: integer\nFOR i = 1 TO 2\nENDFOR\nENDFOR",
        "DECLARE i : INTEGER\nFOR i ← 1 TO 3\nNEXT i",
        'DECLARE c : CHAR\nc ← "ab"\nc ← \'\'',
    ]

    @pytest.mark.parametrize("code", PROGRAMS)
    def test_validity_matches_errors(self, code):
        res = analyze(code)
        assert res.is_valid == (not any(d.severity == "error" for d in res.diagnostics))

    @pytest.mark.parametrize("code", PROGRAMS)
    def test_no_duplicate_line_message(self, code):
        res = analyze(code)
        keys = [(d.line, d.message) for d in res.diagnostics]
        assert len(keys) == len(set(keys))

    def test_checker_keeps_no_state_between_calls(self):
        checker = PseudocodeChecker()
        checker.check("DECLARE x : INTEGER\nIF TRUE THEN")
        res = checker.check("x ← 1")
        assert messages(res) == ["Variable 'x' must be declared before use"]
