from __future__ import annotations

import unittest

from app.domain.imports import IssueCode
from app.services.import_processor import parse_csv_text
from app.services.template_registry import TemplateRegistry
from app.validators.import_validator import ImportValidator


class TestValidateHeaders(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportValidator()

    def test_required_fields_present_via_aliases(self) -> None:
        errors = self.validator.validate_headers("products", ["Product_Name", "Unit_Price"])
        self.assertEqual(errors, [])

    def test_extra_columns_are_not_an_error(self) -> None:
        errors = self.validator.validate_headers(
            "customers",
            ["name", "email", "Loyalty Tier", "Favourite Colour"],
        )
        self.assertEqual(errors, [])

    def test_single_error_lists_every_missing_field(self) -> None:
        errors = self.validator.validate_headers("bills", ["notes"])

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].code, IssueCode.MISSING_HEADERS)
        self.assertEqual(errors[0].details, {"missing": ["customer_name", "total_amount"]})
        self.assertIn("customer_name, total_amount", errors[0].message)


class TestValidateRow(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportValidator()

    def test_one_missing_required_error_per_missing_field(self) -> None:
        errors = self.validator.validate_row("customers", {"name": "  ", "phone": "1"}, 4)

        self.assertEqual([error.code for error in errors], [IssueCode.MISSING_REQUIRED] * 2)
        self.assertEqual([error.field for error in errors], ["name", "email"])
        self.assertTrue(all(error.row_number == 5 for error in errors))

    def test_number_with_currency_symbol_is_valid(self) -> None:
        errors = self.validator.validate_row("products", {"name": "Mug", "price": "₹1,250.00"}, 0)
        self.assertEqual(errors, [])

    def test_invalid_number_reports_raw_value(self) -> None:
        errors = self.validator.validate_row("products", {"name": "Mug", "price": "free"}, 0)

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].code, IssueCode.INVALID_TYPE)
        self.assertEqual(errors[0].message, "price must be a number")
        self.assertEqual(errors[0].value, "free")

    def test_constraint_violation_names_the_bound(self) -> None:
        errors = self.validator.validate_row(
            "products",
            {"name": "Mug", "price": "5", "stock_quantity": "-3"},
            1,
        )

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].code, IssueCode.CONSTRAINT_VIOLATION)
        self.assertEqual(errors[0].message, "stock_quantity must be at least 0")
        self.assertEqual(errors[0].row_number, 2)

    def test_out_of_range_number_is_an_invalid_type(self) -> None:
        errors = self.validator.validate_row("products", {"name": "X", "price": "-1" + "0" * 400}, 0)

        self.assertEqual([error.code for error in errors], [IssueCode.INVALID_TYPE])
        self.assertEqual(errors[0].field, "price")

    def test_out_of_range_bill_total_is_rejected(self) -> None:
        errors = self.validator.validate_row(
            "bills",
            {"customer_name": "Asha", "total_amount": "9" * 400},
            0,
        )

        self.assertEqual([error.code for error in errors], [IssueCode.INVALID_TYPE])

    def test_email_and_date_types(self) -> None:
        errors = self.validator.validate_row(
            "bills",
            {
                "customer_name": "Ann",
                "total_amount": "10",
                "customer_email": "ann-at-example",
                "due_date": "2024-13-01",
            },
            0,
        )

        self.assertEqual(
            [error.message for error in errors],
            [
                "customer_email must be a valid email address",
                "due_date must be a valid date (YYYY-MM-DD)",
            ],
        )


class TestValidateFile(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportValidator()

    def test_header_errors_short_circuit_row_checks(self) -> None:
        rows = [{"title": "", "cost": "abc"}]
        report = self.validator.validate_file("products", rows, ["title", "cost"])

        self.assertFalse(report.is_valid)
        self.assertEqual([error.code for error in report.errors], [IssueCode.MISSING_HEADERS])
        self.assertEqual(report.total_rows, 1)

    def test_valid_rows_formula_ignores_missing_required(self) -> None:
        rows = [
            {"name": "", "price": "1"},
            {"name": "B", "price": "x"},
            {"name": "C", "price": "-1"},
            {"name": "D", "price": "2"},
        ]
        report = self.validator.validate_file("products", rows, ["name", "price"])

        self.assertFalse(report.is_valid)
        self.assertEqual(len(report.errors), 3)
        self.assertEqual(report.valid_rows, 2)

    def test_duplicate_customers_warn_without_blocking(self) -> None:
        rows = [
            {"name": "Ann", "email": "ann@example.com", "phone": "1"},
            {"name": "Ann", "email": "ann@example.com", "phone": "2"},
            {"name": "Bob", "email": "bob@example.com", "phone": "3"},
        ]
        report = self.validator.validate_file("customers", rows, ["name", "email", "phone"])

        self.assertTrue(report.is_valid)
        self.assertEqual(len(report.warnings), 1)
        warning = report.warnings[0]
        self.assertEqual(warning.code, IssueCode.DUPLICATE_ROWS)
        self.assertEqual(warning.details["rows"], [2])
        self.assertEqual(warning.details["pairs"], [{"first_row": 1, "duplicate_row": 2}])

    def test_products_template_round_trips(self) -> None:
        parsed = parse_csv_text(TemplateRegistry().render_template("products"))
        report = self.validator.validate_file("products", parsed.rows, parsed.headers)

        self.assertTrue(report.is_valid)
        self.assertEqual(report.errors, [])
        self.assertEqual(report.total_rows, 2)


class TestBuildErrorReport(unittest.TestCase):
    def test_groups_errors_and_picks_recommendations(self) -> None:
        validator = ImportValidator()
        rows = [{"name": "", "price": "x"}]
        report = validator.validate_file("products", rows, ["name", "price"])

        summary = validator.build_error_report(report)

        self.assertEqual(summary["summary"]["total_errors"], 2)
        self.assertFalse(summary["summary"]["is_valid"])
        self.assertEqual(
            sorted(summary["errors"]),
            [IssueCode.INVALID_TYPE, IssueCode.MISSING_REQUIRED],
        )
        self.assertEqual(len(summary["recommendations"]), 2)


if __name__ == "__main__":
    unittest.main()
