"""
Protocol clients for zeroex_swap
"""
