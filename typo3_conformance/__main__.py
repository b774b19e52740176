from typo3_conformance.cli.app import app

app(prog_name="typo3-conformance")
