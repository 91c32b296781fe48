from .rds_backup import main

main()
