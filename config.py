# Path of the git repository to operate on. The repository is searched
# upwards from here, so any directory inside the working tree works.
base_dir = '.'

# Log the progress while files are written when the current branch is
# fast-forwarded
show_progress = True

# Minimum progress in percent between two progress messages
progress_step = 10

# Message stored in the reflog of each fast-forwarded branch. {target} is
# replaced by the target as given on the command line.
reflog_message = 'gitff: fast-forward to {target}'

# strftime format of the commit times shown by gitff recent
date_format = '%Y-%m-%d %H:%M:%S'
