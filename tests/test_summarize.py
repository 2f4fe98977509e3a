from textwrap import dedent

from reviewer.model import Dialect, Snippet
from reviewer.summarize import DEFAULT_SUMMARY, finalize, summarize


def _summary(code, dialect):
	return summarize(Snippet.from_text(code), dialect)


def test_finalize_adds_period_and_capitalizes():
	assert finalize("  reads the file ") == "Reads the file."
	assert finalize("") == DEFAULT_SUMMARY


def test_finalize_truncates_with_single_period():
	long_text = "a. " * 100
	result = finalize(long_text)
	assert len(result) <= 120
	assert result.endswith(".")
	assert not result.endswith("..")

	result = finalize("x" * 200)
	assert len(result) == 120
	assert result == "X" + "x" * 118 + "."


def test_blank_snippet():
	assert _summary("   ", Dialect.CSHARP) == DEFAULT_SUMMARY


def test_loan_parameters():
	code = "public decimal Compute(decimal principal, decimal rate, int term) { return 0; }"
	assert _summary(code, Dialect.CSHARP) == "Calculates loan interest."


def test_verb_from_first_method_name():
	assert _summary("public void SaveCustomer(Customer c) { }", Dialect.CSHARP) == "Saves data to the database."
	assert _summary("public User GetUser(int id) { }", Dialect.CSHARP) == "Retrieves application data."
	assert _summary("void RemoveItem(int id) { }", Dialect.CSHARP) == "Deletes records."
	assert _summary("Public Sub ValidateInput()\nEnd Sub", Dialect.VBNET) == "Validates input or state."
	assert _summary("Private Function CalculateTotal() As Integer", Dialect.VBNET) == "Performs a calculation."


def test_class_name_fallback_and_generic():
	assert _summary("public class OrderUpdater { }", Dialect.CSHARP) == "Updates application data."
	assert _summary("public class Engine { }", Dialect.CSHARP) == "Processes application logic."


def test_sql_statements():
	assert _summary("SELECT Id FROM dbo.Orders WHERE Id = 1", Dialect.SQL) == "Retrieves data from dbo.Orders."
	assert _summary("INSERT INTO Customers (Name) VALUES ('x')", Dialect.SQL) == "Inserts new records into Customers."
	assert _summary("UPDATE Orders SET Total = 0", Dialect.SQL) == "Updates records in Orders."
	assert _summary("DELETE FROM Orders", Dialect.SQL) == "Deletes records from Orders."
	assert _summary("EXEC sp_who", Dialect.SQL) == "Executes SQL command."


def test_sql_missing_table_defaults():
	assert _summary("SELECT 1", Dialect.SQL) == "Retrieves data from table."


def test_sql_routine_definition():
	code = dedent(
		"""\
		CREATE PROCEDURE dbo.Archive AS
		BEGIN
			TRUNCATE TABLE Logs
		END
		"""
	)
	assert _summary(code, Dialect.SQL) == "Defines stored procedure/function Archive."


def test_summary_length_is_configurable():
	from reviewer.config import ReviewerSettings

	result = summarize(Snippet.from_text("EXEC sp_who"), Dialect.SQL, ReviewerSettings(max_summary_length=10))
	assert len(result) <= 10
	assert result.endswith(".")
