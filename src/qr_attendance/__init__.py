"""QR attendance package.

Organized by feature modules (qrcodes, attendance, employees, policy, ...)
with a thin Flask controller layer over service/repository layers.
"""
