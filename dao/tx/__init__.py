"""
dao.tx — transaction handlers, one module per transaction type.

Each handler module exposes the same lifecycle functions:
``validate_fields``, ``validate``, ``apply``, ``transaction_receipt_pass``, ``keys``.
Route a transaction to its module with `dao.runtime.dispatcher.handler_for`.
"""
