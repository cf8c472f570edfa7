from calculator import run_calculator
import sys

if __name__ == '__main__':
    sys.exit(run_calculator(sys.argv[1:]))
