import math

# Pure Python Reed-Solomon encoder over GF(2^8)
PRIMITIVE_POLY = 0x11D  # x^8 + x^4 + x^3 + x^2 + 1
MIN_ECC_BYTES = 4
ECC_RATIO = 0.25


def build_tables(poly=PRIMITIVE_POLY):
    exp = [0] * 512
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= poly
    # Duplicate so log[a] + log[b] never needs a modulo
    for i in range(255, 512):
        exp[i] = exp[i - 255]
    return tuple(exp), tuple(log)


GF_EXP, GF_LOG = build_tables()


def gf_mul(a, b):
    if a == 0 or b == 0:
        return 0
    return GF_EXP[GF_LOG[a] + GF_LOG[b]]


def gf_poly_mul(p, q):
    r = [0] * (len(p) + len(q) - 1)
    for j in range(len(q)):
        for i in range(len(p)):
            r[i + j] ^= gf_mul(p[i], q[j])
    return r


def gf_poly_eval(poly, x):
    # Horner, highest degree first
    y = 0
    for coef in poly:
        y = gf_mul(y, x) ^ coef
    return y


def rs_generator_poly(ecc_count):
    gen = [1]
    for i in range(ecc_count):
        gen = gf_poly_mul(gen, [1, GF_EXP[i]])
    return gen


def rs_encode(message, ecc_count):
    """Return the ecc_count parity symbols of message (systematic encoding)."""
    if ecc_count < 1:
        raise ValueError(f"ECC count must be at least 1, got {ecc_count}")
    gen = rs_generator_poly(ecc_count)
    poly = list(message) + [0] * ecc_count
    for i in range(len(message)):
        coef = poly[i]
        if coef != 0:
            # gen[0] is 1, so poly[i] cancels to zero
            for j in range(len(gen)):
                poly[i + j] ^= gf_mul(coef, gen[j])
    return poly[len(message):]


def ecc_count_for(length):
    return max(MIN_ECC_BYTES, math.ceil(length * ECC_RATIO))
