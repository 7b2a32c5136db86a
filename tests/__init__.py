"""s3filepath test suite.

- test_paths.py: path rendering and parsing
- test_models.py: bucket and resolved-object descriptors
- test_resolver.py: ordered candidate resolution
- test_checker.py: S3 (moto) and local existence checks
- test_config.py / test_cli.py / test_logging_setup.py: ambient layers
"""
