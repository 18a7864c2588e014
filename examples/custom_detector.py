from mpfluor import schema as ms

# 16-bit ADC on a 3.3 V rail, with a quieter front end and larger particles
gen = ms.DatasetGeneration(
    generator=ms.MeasurementGenerator(
        detector=ms.Photodiode(bit_depth=16, full_scale_voltage=3.3, name="PD-16"),
        noise=ms.NoiseModel(johnson_v=0.0005, flicker_v=0.0002),
        sizes=ms.LogNormalSizes(mean_um=800, sigma=0.4),
    ),
    sweep_grid=ms.SweepGrid(polymers=("PS", "PET"), replicates=1),
    filtration_grid=ms.FiltrationGrid(initial_counts=(1000,), replicates=2),
    settings=ms.Settings(random_seed=7),
)

result = gen.run(progress=lambda pct: None)
print(gen.model_dump_json(indent=2))
print(max(r.digital_counts for r in result.sweep))
