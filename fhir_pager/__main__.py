from fhir_pager.cli import app

app(prog_name="fhir-pager")
