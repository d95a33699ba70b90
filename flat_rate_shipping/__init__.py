"""
Flat-rate shipping rates.

One provider stage of a multi-provider shipping-rate pipeline: validates the
cart, checks marketplace delegation, and prices every enabled flat-rate method
for the shops in the cart.
"""
