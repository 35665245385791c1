"""
Library modules shared by all `rebyte.units.Unit`s. The hexdump decoding engine lives in
`rebyte.lib.hexdump`.
"""
