from pgbouncer_exporter.main import run

run()
