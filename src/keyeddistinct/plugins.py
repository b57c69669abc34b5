COMPARATORS_EP = "keyeddistinct.comparators"
