from score_sync.cli.main import entrypoint

entrypoint()
