from stylestrata.cli import main

main(prog_name="stylestrata")
