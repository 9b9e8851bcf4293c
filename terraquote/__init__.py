"""TerraQuote: solar quote PDF generation for Terra Energy prospects."""
