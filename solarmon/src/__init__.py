"""
Solar monitor package for a Selectronic SP PRO battery inverter.

Polls the inverter's local solarmonweb endpoint on a fixed interval, keeps a
short rolling history of samples in memory, derives trend metrics (average
power flows, hours until battery full/empty), and serves the latest snapshot
plus metrics over HTTP.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""
