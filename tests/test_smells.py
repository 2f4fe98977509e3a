from textwrap import dedent

from reviewer.config import get_settings
from reviewer.model import Dialect, Severity, Snippet
from reviewer.smells import detect_smells, repeated_literals


def _smells(code, dialect, kind=None):
	issues = detect_smells(Snippet.from_text(code), dialect)
	return [i for i in issues if kind is None or i.kind == kind]


def test_repeated_string_literal():
	code = dedent(
		"""\
		var a = "x";
		var b = "x";
		var c = "x";
		"""
	)
	issues = _smells(code, Dialect.CSHARP)
	assert len(issues) == 1
	assert issues[0].kind == "Smell.RepeatedLiteral"
	assert issues[0].line_number == 1
	assert "appears 3 times" in issues[0].message
	assert issues[0].severity is Severity.INFO


def test_repeated_literal_ignores_case_and_needs_distinct_lines():
	code = 'Log("Done");\nLog("DONE");\nLog("done"); Log("done");'
	issues = repeated_literals(Snippet.from_text(code), get_settings())
	assert len(issues) == 1
	assert "appears 4 times across 3 lines" in issues[0].message

	two_lines = 'Log("x"); Log("x"); Log("x");\nLog("x");'
	assert repeated_literals(Snippet.from_text(two_lines), get_settings()) == []


def test_repeated_number():
	code = "a = 42\nb = 42\nc = 42"
	issues = _smells(code, Dialect.UNKNOWN)
	assert [i.message for i in issues] == ["Literal 42 appears 3 times across 3 lines."]


def test_csharp_deep_nesting():
	code = dedent(
		"""\
		void Run()
		{
			if (a) {
				if (b) {
					if (c) {
						Go();
					}
				}
			}
		}
		"""
	)
	issues = _smells(code, Dialect.CSHARP, "Smell.DeepNesting")
	assert len(issues) == 1
	assert issues[0].line_number == 1
	assert "'Run'" in issues[0].message


def test_csharp_three_levels_is_fine():
	code = dedent(
		"""\
		void Run()
		{
			if (a) {
				if (b) {
					Go();
				}
			}
		}
		"""
	)
	assert _smells(code, Dialect.CSHARP, "Smell.DeepNesting") == []


def test_vb_deep_nesting():
	code = dedent(
		"""\
		Sub Run()
			If a Then
				If b Then
					If c Then
						x = y
					End If
				End If
			End If
		End Sub
		"""
	)
	issues = _smells(code, Dialect.VBNET, "Smell.DeepNesting")
	assert [i.line_number for i in issues] == [1]


def test_vb_single_line_if_does_not_nest():
	code = dedent(
		"""\
		Sub Run()
			If a Then x = y
			If b Then x = z
			If c Then x = w
			If d Then x = v
		End Sub
		"""
	)
	assert _smells(code, Dialect.VBNET, "Smell.DeepNesting") == []


def test_sql_deep_nesting_in_procedure():
	code = dedent(
		"""\
		CREATE PROCEDURE dbo.Nest AS
		BEGIN
			BEGIN
				BEGIN
					BEGIN
						SELECT Id FROM Orders
					END
				END
			END
		END
		"""
	)
	issues = _smells(code, Dialect.SQL, "Smell.DeepNesting")
	assert len(issues) == 1
	assert issues[0].line_number == 1
	assert "'Nest'" in issues[0].message


def test_long_parameter_lists():
	csharp = "public void Save(int a, int b, int c, int d, int e, int f) { }"
	issues = _smells(csharp, Dialect.CSHARP, "Smell.LongParameterList")
	assert [(i.line_number, i.message) for i in issues] == [(1, "Method 'Save' has 6 parameters.")]

	vb = "Public Function Build(a As Integer, b, c, d, e, f) As String"
	assert len(_smells(vb, Dialect.VBNET, "Smell.LongParameterList")) == 1

	sql = "CREATE PROCEDURE dbo.AddAll @a INT, @b INT, @c INT, @d INT, @e INT, @f INT AS"
	issues = _smells(sql, Dialect.SQL, "Smell.LongParameterList")
	assert [i.message for i in issues] == ["Procedure 'AddAll' has 6 parameters."]


def test_five_parameters_and_generics_are_fine():
	code = "void Map(Dictionary<string, int> a, int b, int c, int d, int e) { }"
	assert _smells(code, Dialect.CSHARP, "Smell.LongParameterList") == []


def test_large_class_by_method_count():
	body = "\n".join(f"    public void Step{n}() {{ }}" for n in range(11))
	code = f"public class Big\n{{\n{body}\n}}"
	issues = _smells(code, Dialect.CSHARP, "Smell.LargeClass")
	assert len(issues) == 1
	assert issues[0].line_number == 1
	assert "has 11 methods" in issues[0].message


def test_large_class_by_span():
	code = "public class Big\n{\n" + "    int count;\n" * 300 + "}"
	issues = _smells(code, Dialect.CSHARP, "Smell.LargeClass")
	assert len(issues) == 1
	assert "spans 302 lines" in issues[0].message


def test_vb_large_class():
	body = "\n".join(f"    Sub Step{n}()\n    End Sub" for n in range(11))
	code = f"Public Class Big\n{body}\nEnd Class"
	issues = _smells(code, Dialect.VBNET, "Smell.LargeClass")
	assert len(issues) == 1
	assert "has 11 methods" in issues[0].message


def test_sql_large_procedure():
	code = "CREATE PROCEDURE dbo.Huge AS\nBEGIN\n" + "    PRINT 'step';\n" * 300 + "END"
	issues = _smells(code, Dialect.SQL, "Smell.LargeProcedure")
	assert len(issues) == 1
	assert issues[0].message == "Procedure/Function 'Huge' spans 302 lines."


def test_blank_snippet_has_no_smells():
	assert _smells("", Dialect.CSHARP) == []


def test_sql_precision_types_do_not_inflate_parameter_count():
	code = "CREATE PROCEDURE dbo.Pay @a INT, @b DECIMAL(18,2), @c DECIMAL(18,2), @d INT AS"
	assert _smells(code, Dialect.SQL, "Smell.LongParameterList") == []

	code = "CREATE PROCEDURE dbo.Pay @a INT, @b DECIMAL(18,2), @c INT, @d INT, @e INT, @f MONEY AS"
	issues = _smells(code, Dialect.SQL, "Smell.LongParameterList")
	assert [i.message for i in issues] == ["Procedure 'Pay' has 6 parameters."]


def test_sql_script_deep_nesting_without_procedure():
	code = dedent(
		"""\
		IF @x = 1
		BEGIN
			BEGIN
				BEGIN
					BEGIN
						PRINT 'deep'
					END
				END
			END
		END
		"""
	)
	issues = _smells(code, Dialect.SQL, "Smell.DeepNesting")
	assert len(issues) == 1
	assert issues[0].line_number == 1
	assert issues[0].message == "Nested BEGIN/END blocks exceed 3 levels."
	assert "in procedure" not in issues[0].message
