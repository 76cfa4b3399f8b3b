# Email asset generation backend package
