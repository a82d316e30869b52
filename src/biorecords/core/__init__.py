"""Record codec framework: numeric fields, validity, peak lists and streaming."""
