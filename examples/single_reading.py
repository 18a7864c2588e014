from mpfluor import schema as ms

generator = ms.MeasurementGenerator()
xp = ms.RandomSource(seed=2024)

for polymer in ms.POLYMERS:
    m = generator.generate(1000, polymer, dye_conc=5.0, excitation_nm=488, xp=xp)
    print(f"{polymer:>4}: {m.digital_counts:5d} counts, SNR {m.signal_to_noise:.1f}")
